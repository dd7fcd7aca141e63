from core.argument_splitter import split_args, split_command_line


def test_quotes_group_words() -> None:
    assert split_args('foo "bar baz" 123') == ["foo", "bar baz", "123"]


def test_runs_of_whitespace_separate_once() -> None:
    assert split_args("  a \t b   c  ") == ["a", "b", "c"]


def test_quotes_inside_a_word_are_removed() -> None:
    assert split_args('ab"c d"e f') == ["abc de", "f"]


def test_unterminated_quote_runs_to_end_of_line() -> None:
    assert split_args('say "hello there') == ["say", "hello there"]


def test_empty_input_yields_single_empty_word() -> None:
    assert split_args("") == [""]
    assert split_args("   ") == [""]


def test_command_line_separates_command_and_keeps_raw_args() -> None:
    line = split_command_line('getperms  "Some User" extra ')
    assert line.command == "getperms"
    assert line.args == ["Some User", "extra"]
    assert line.raw_args == '"Some User" extra'


def test_command_line_without_arguments() -> None:
    line = split_command_line("help")
    assert line.command == "help"
    assert line.args == []
    assert line.raw_args == ""


def test_command_line_from_empty_text() -> None:
    line = split_command_line("")
    assert line.command == ""
    assert line.args == []
