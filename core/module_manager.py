from typing import Dict, List, Optional
from utils.logger import setup_logger
from .module_interface import ModuleInterface

class ModuleManager:
    """Manages loading and lifecycle of bot modules"""

    def __init__(self):
        self.logger = setup_logger(__name__)
        self.modules: Dict[str, ModuleInterface] = {}
        self._module_states: Dict[str, bool] = {}

    def register(self, name: str, module: ModuleInterface) -> None:
        """Add a module; modules initialize in registration order"""
        if name in self.modules:
            raise ValueError(f"Module {name} is already registered")
        self.modules[name] = module
        self._module_states[name] = False

    def get(self, name: str) -> Optional[ModuleInterface]:
        return self.modules.get(name)

    def is_initialized(self, name: str) -> bool:
        return self._module_states.get(name, False)

    def initialize(self, system) -> bool:
        """Initialize every registered module, continuing past failures"""
        success = True
        for name, module in self.modules.items():
            try:
                if module.initialize(system):
                    self._module_states[name] = True
                    self.logger.info(f"Initialized module {name}")
                else:
                    success = False
                    self.logger.error(f"Failed to initialize module {name}")
            except Exception as e:
                success = False
                self.logger.error(f"Error initializing module {name}: {e}")
        return success

    def _shutdown_order(self) -> List[str]:
        return list(reversed(list(self.modules.keys())))

    def shutdown(self) -> bool:
        """Shutdown all modules in reverse registration order"""
        shutdown_order = self._shutdown_order()
        self.logger.info(f"Shutting down modules in order: {shutdown_order}")

        success = True
        try:
            for name in shutdown_order:
                module = self.modules[name]
                try:
                    if module.shutdown():
                        self.logger.info(f"Successfully shutdown {name}")
                    else:
                        success = False
                        self.logger.error(f"Failed to shutdown {name}")
                except Exception as e:
                    success = False
                    self.logger.error(f"Error during {name} shutdown: {e}")
            return success
        finally:
            # Clear module references
            self.modules.clear()
            self._module_states.clear()
