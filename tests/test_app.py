"""End-to-end command tests for PromptBoostApp with fake vendors."""

import io

import pytest

from promptboost.app import PromptBoostApp
from promptboost.boost import BoostStatus, ErrorKind
from promptboost.editor import LineRange
from promptboost.instructions import DEFAULT_BOOST_INSTRUCTIONS, instruction_file_path
from promptboost.progress import ConsoleProgressReporter
from test_helpers import FakeDiscovery, FakeInteraction, FakeProvider, make_endpoint, make_settings


async def _app(tmp_path, endpoints, *, choice=None, **settings_values):
    interaction = FakeInteraction(choice=choice)
    app = PromptBoostApp(
        make_settings(**settings_values),
        tmp_path / "storage",
        discovery=FakeDiscovery(endpoints),
        interaction=interaction,
        reporter=ConsoleProgressReporter(io.StringIO()),
        log_file="/tmp/promptboost.log",
    )
    await app.activate()
    return app, interaction


@pytest.mark.asyncio
async def test_activate_discovers_and_creates_instruction_file(tmp_path):
    app, _interaction = await _app(tmp_path, [make_endpoint("gpt-x")])

    assert [e.name for e in app.list_models()] == ["gpt-x"]
    assert instruction_file_path(tmp_path / "storage").read_text(encoding="utf-8") == (
        DEFAULT_BOOST_INSTRUCTIONS
    )


@pytest.mark.asyncio
async def test_boost_file_replaces_content(tmp_path):
    doc = tmp_path / "task.prompt.md"
    doc.write_text("fix my bug", encoding="utf-8")
    endpoint = make_endpoint("gpt-x", FakeProvider(["Please ", "describe ", "the bug."]))
    app, interaction = await _app(tmp_path, [endpoint], preferredModel="gpt-x")

    result = await app.boost(doc)

    assert result.status is BoostStatus.SUCCESS
    assert doc.read_text(encoding="utf-8") == "Please describe the bug."
    assert interaction.notices == ["Prompt boosted"]


@pytest.mark.asyncio
async def test_boost_line_range_keeps_surrounding_text(tmp_path):
    doc = tmp_path / "task.prompt.md"
    doc.write_text("# Header\nrough idea\n# Footer\n", encoding="utf-8")
    endpoint = make_endpoint("gpt-x", FakeProvider(["Sharp idea"]))
    app, _interaction = await _app(tmp_path, [endpoint], preferredModel="gpt-x")

    await app.boost(doc, LineRange(2, 2))

    assert doc.read_text(encoding="utf-8") == "# Header\nSharp idea\n# Footer\n"


@pytest.mark.asyncio
async def test_boost_refuses_ineligible_file_unless_forced(tmp_path):
    doc = tmp_path / "notes.md"
    doc.write_text("draft", encoding="utf-8")
    endpoint = make_endpoint("gpt-x", FakeProvider(["better"]))
    app, interaction = await _app(tmp_path, [endpoint], preferredModel="gpt-x")

    assert await app.boost(doc) is None
    assert "Boost is not enabled for notes.md" in interaction.errors[0]
    assert doc.read_text(encoding="utf-8") == "draft"

    result = await app.boost(doc, force=True)
    assert result.ok
    assert doc.read_text(encoding="utf-8") == "better"


@pytest.mark.asyncio
async def test_boost_failure_leaves_file_untouched(tmp_path):
    doc = tmp_path / "task.prompt.md"
    doc.write_text("draft", encoding="utf-8")
    endpoint = make_endpoint("gpt-x", FakeProvider(["   "]))
    app, interaction = await _app(tmp_path, [endpoint], preferredModel="gpt-x")

    result = await app.boost(doc)

    assert result.error is ErrorKind.EMPTY_RESPONSE
    assert doc.read_text(encoding="utf-8") == "draft"
    assert interaction.notices == ["See log: /tmp/promptboost.log"]


@pytest.mark.asyncio
async def test_boost_stdin_prints_result(tmp_path):
    endpoint = make_endpoint("gpt-x", FakeProvider(["better"]))
    app, _interaction = await _app(tmp_path, [endpoint], preferredModel="gpt-x")
    out = io.StringIO()

    result = await app.boost(stdin=io.StringIO("draft"), stdout=out)

    assert result.ok
    assert out.getvalue() == "better\n"


@pytest.mark.asyncio
async def test_boost_without_models_is_terminated(tmp_path):
    app, interaction = await _app(tmp_path, [])

    result = await app.boost(stdin=io.StringIO("draft"))

    assert result.status is BoostStatus.TERMINATED
    assert result.text == "draft"
    assert result.error is ErrorKind.NO_MODELS
    assert interaction.errors


@pytest.mark.asyncio
async def test_boost_with_dismissed_chooser_is_terminated(tmp_path):
    app, interaction = await _app(tmp_path, [make_endpoint("gpt-x")], choice=None)

    result = await app.boost(stdin=io.StringIO("draft"))

    assert result.status is BoostStatus.TERMINATED
    assert result.error is ErrorKind.NO_SELECTION
    assert interaction.warnings == ["No model selected, boost cancelled."]


@pytest.mark.asyncio
async def test_boost_rejects_blank_prompt(tmp_path):
    app, interaction = await _app(tmp_path, [make_endpoint("gpt-x")], preferredModel="gpt-x")

    assert await app.boost(stdin=io.StringIO("  \n")) is None
    assert interaction.errors == ["Nothing to boost: the prompt text is empty."]


@pytest.mark.asyncio
async def test_check_and_select_model(tmp_path):
    app, _interaction = await _app(tmp_path, [make_endpoint("gpt-x")], choice=0)

    assert app.check("a/b/x.prompt.md")["enabled"] is True
    assert (await app.select_model()).name == "gpt-x"
    assert app.preferences.get() == "gpt-x"
