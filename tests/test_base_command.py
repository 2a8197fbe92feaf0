import pytest

from leftwm.base_command import BaseCommand


def test_documentation_lists_every_command_in_order():
    doc = BaseCommand.documentation()
    names = [
        line for line in doc.split("\n") if line and not line.startswith("    ")
    ]
    assert names == [member.name for member in BaseCommand]


def test_documentation_starts_with_newline():
    assert BaseCommand.documentation().startswith("\nExecute\nCloseWindow")


def test_documentation_includes_argument_notes():
    doc = BaseCommand.documentation()
    assert "\nAttachScratchPad\n    Args: `ScratchpadName`\n" in doc
    assert (
        "\nMoveToTag\n    Args: `tag_index` (int)\n"
        "    Note: Please use `SendWindowToTag` instead.\n" in doc
    )


def test_documentation_ends_with_load_theme_note():
    doc = BaseCommand.documentation()
    assert doc.endswith("stays for backwards compatibility for a while")


@pytest.mark.parametrize(
    ("command", "expected"),
    [
        (BaseCommand.SwapTags, "SwapScreens"),
        (BaseCommand.GotoTag, "GoToTag"),
        (BaseCommand.MoveToTag, "SendWindowToTag"),
        (BaseCommand.MoveToLastWorkspace, "MoveWindowToLastWorkspace"),
        (BaseCommand.Execute, ""),
    ],
)
def test_special_command_names(command, expected):
    assert command.command_name() == expected


def test_ordinary_command_name_is_member_name():
    assert BaseCommand.CloseWindow.command_name() == "CloseWindow"
    assert BaseCommand.SetMarginMultiplier.command_name() == "SetMarginMultiplier"


def test_lookup_by_value_round_trip():
    for member in BaseCommand:
        assert BaseCommand(member.value) is member