"""
Tests for configuration loading and listener declarations.
"""

import json
import re

import pytest
from loguru import logger

from chatroute.config.loader import (
    camel_to_snake,
    convert_keys,
    load_config,
    save_config,
    snake_to_camel,
)
from chatroute.config.schema import ActionConstraints, Config, ListenerConfig
from chatroute.middleware.builtin import (
    DirectMention,
    MatchCommandName,
    MatchConstraints,
    MatchEventType,
    MatchMessage,
    only_commands,
    only_events,
)
from chatroute.middleware.chain import ListenerChain


class TestKeyConversion:
    def test_camel_snake(self):
        assert camel_to_snake("blockId") == "block_id"
        assert snake_to_camel("callback_id") == "callbackId"

    def test_nested(self):
        data = {"listeners": [{"eventType": "message", "constraints": {"actionId": "a"}}]}
        assert convert_keys(data) == {
            "listeners": [{"event_type": "message", "constraints": {"action_id": "a"}}]
        }


class TestActionConstraints:
    def test_strings_stay_strings(self):
        c = ActionConstraints(block_id="b1")
        assert c.block_id == "b1"
        assert c.action_id is None

    def test_pattern_objects_compile(self):
        c = ActionConstraints.model_validate({"action_id": {"pattern": r"^a_(\d+)$", "ignore_case": True}})
        assert isinstance(c.action_id, re.Pattern)
        assert c.action_id.flags & re.IGNORECASE
        assert c.action_id.search("A_12")

    def test_compiled_pattern_accepted(self):
        pattern = re.compile("x")
        assert ActionConstraints(callback_id=pattern).callback_id is pattern

    def test_frozen(self):
        c = ActionConstraints(block_id="b1")
        with pytest.raises(Exception):
            c.block_id = "b2"


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.json")
        assert config.ignore_self is True
        assert config.listeners == []

    def test_invalid_json_uses_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(path) == Config()

    def test_bad_regex_uses_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"listeners": [{"name": "x", "message": {"pattern": "("}}]}))
        assert load_config(path).listeners == []

    def test_camel_case_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "ignoreSelf": False,
            "logLevel": "DEBUG",
            "listeners": [
                {"name": "approve", "constraints": {"actionId": {"pattern": "approve_(\\w+)"}}},
                {"name": "deploy", "command": "/deploy"},
            ],
        }))

        config = load_config(path)

        assert config.ignore_self is False
        assert config.log_level == "DEBUG"
        approve = config.get_listener("approve")
        assert approve.constraints.action_id.pattern == "approve_(\\w+)"
        assert config.get_listener("deploy").command == "/deploy"
        assert config.get_listener("nope") is None

    def test_setup_logging_uses_configured_level(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"logLevel": "ERROR"}))

        try:
            load_config(path, setup_logging=True)
            logger.warning("below threshold")
            logger.error("at threshold")
        finally:
            logger.remove()

        err = capsys.readouterr().err
        assert "at threshold" in err
        assert "below threshold" not in err

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = Config(listeners=[
            ListenerConfig(name="hi", message=re.compile("h(i)"), direct_mention=True),
            ListenerConfig(name="btn", constraints=ActionConstraints(block_id="b1")),
        ])

        save_config(config, path)
        raw = json.loads(path.read_text())
        reloaded = load_config(path)

        assert raw["listeners"][0]["directMention"] is True
        assert raw["listeners"][0]["message"] == {"pattern": "h(i)"}
        assert reloaded.get_listener("hi").message.pattern == "h(i)"
        assert reloaded.get_listener("btn").constraints.block_id == "b1"


class TestListenerConfig:
    def test_build_middleware_order(self):
        listener = ListenerConfig(
            name="deploy",
            command="/deploy",
            constraints={"callback_id": "cb"},
        )
        links = listener.build_middleware()

        assert isinstance(links[0], MatchConstraints)
        assert links[1] is only_commands
        assert isinstance(links[2], MatchCommandName)

    def test_message_listener_guarded_by_event_type(self):
        links = ListenerConfig(name="m", message="help", direct_mention=True).build_middleware()

        assert links[0] is only_events
        assert [type(link) for link in links[1:]] == [MatchEventType, DirectMention, MatchMessage]
        assert links[1].expected == "message"

    @pytest.mark.asyncio
    async def test_mention_listener_filters_other_kinds_without_context(self, slash_command, block_action):
        chain = ListenerChain(ListenerConfig(name="m", direct_mention=True).build_middleware())

        assert (await chain.run(slash_command("/deploy"), {})).is_filtered
        assert (await chain.run(block_action(), {})).is_filtered

    @pytest.mark.asyncio
    async def test_mention_listener_runs_on_message(self, message):
        chain = ListenerChain(ListenerConfig(name="m", direct_mention=True, message="deploy").build_middleware())

        result = await chain.run(message("<@U1> deploy"), {"bot_user_id": "U1"})

        assert result.is_matched

    @pytest.mark.asyncio
    async def test_declared_listener_runs(self, slash_command):
        seen = []

        async def handler(request, context):
            seen.append(request.command["command"])

        links = ListenerConfig(name="deploy", command="/deploy").build_middleware()
        chain = ListenerChain(links, handler)

        assert (await chain.run(slash_command("/deploy"))).is_matched
        assert (await chain.run(slash_command("/other"))).is_filtered
        assert seen == ["/deploy"]
