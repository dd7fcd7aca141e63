class ModuleInterface:
    """Base interface that all modules must implement"""

    def initialize(self, system) -> bool:
        """Initialize the module against a BotSystem - returns True if successful"""
        raise NotImplementedError

    def shutdown(self) -> bool:
        """Clean shutdown of module - returns True if successful"""
        return True
