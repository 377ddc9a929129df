import pytest
import typer
from typer.testing import CliRunner

from rpn_cli import app, parse_binding

runner = CliRunner()


def test_prints_result():
    result = runner.invoke(app, ["(a + b + c) * 2", "-v", "a=1", "-v", "b=1", "--var", "c=7"])
    assert result.exit_code == 0
    assert result.output.strip() == "18.0"


def test_prints_postfix():
    result = runner.invoke(app, ["2^3^2", "--postfix"])
    assert result.exit_code == 0
    assert result.output.split("\n")[:2] == ["2 3 2 ^ ^", "512.0"]


def test_division_by_zero_is_not_an_error():
    result = runner.invoke(app, ["1/0"])
    assert result.exit_code == 0
    assert result.output.strip() == "inf"


def test_error_messages():
    for args, message in [
        (["(1 + 2"], "There are mismatched parenthesis"),
        (["1 +"], "There are insufficient values"),
        (["1 2"], "There are too many values"),
        (["x + 1"], "Missing variable value: x"),
        (["1 $ 2", "--strict"], "Unknown token: '$'"),
    ]:
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert message in result.output


def test_bad_bindings():
    for binding in ["x", "xy=1", "x=one", "=1"]:
        result = runner.invoke(app, ["x + 1", "-v", binding])
        assert result.exit_code == 2


def test_long_postfix_stays_on_one_line():
    expression = "+".join(["a"] * 60)
    result = runner.invoke(app, [expression, "--postfix", "-v", "a=1"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [" ".join(["a", "a", "+"] + ["a", "+"] * 58), "60.0"]


def test_bad_number_does_not_chain_the_value_error():
    with pytest.raises(typer.BadParameter) as excinfo:
        parse_binding("x=one")
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__
