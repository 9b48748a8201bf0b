"""Tests for command parsing and event routing."""

import pytest

from cleanbot.rotation import (
    ChatCommand,
    CommandKind,
    ReminderTick,
    RotationTick,
    SyncUsers,
    messages,
    parse_command,
)

NOTIFY_CHANNEL_ID = 1000
ORIGIN_CHANNEL_ID = 2000


class TestParseCommand:
    @pytest.mark.parametrize("text,kind,argument", [
        ("掃除完了", CommandKind.FINISH, ""),
        ("clean who", CommandKind.WHO, ""),
        ("clean list", CommandKind.LIST, ""),
        ("clean fin", CommandKind.FIN, ""),
        ("clean skip", CommandKind.SKIP, ""),
        ("clean postpone", CommandKind.POSTPONE, ""),
        ("clean change bob", CommandKind.CHANGE, "bob"),
        ("  clean   zap   Carol Smith ", CommandKind.ZAP, "Carol Smith"),
    ])
    def test_recognized(self, text, kind, argument):
        command = parse_command(text, ORIGIN_CHANNEL_ID)
        assert command == ChatCommand(kind, ORIGIN_CHANNEL_ID, argument)

    @pytest.mark.parametrize("text", ["", "hello there", "clean", "clean dance", "cleaning who"])
    def test_unrelated_chatter(self, text):
        assert parse_command(text) is None

    def test_custom_phrase_and_keyword(self):
        assert parse_command("done!", done_phrase="done!").kind is CommandKind.FINISH
        assert parse_command("duty who", keyword="duty").kind is CommandKind.WHO


class TestDispatch:
    async def test_commands_wait_for_sync(self, dispatcher, controller, notifier, sent):
        await controller.load()

        await dispatcher.dispatch(ChatCommand(CommandKind.SKIP, ORIGIN_CHANNEL_ID))

        notifier.send.assert_awaited_once_with(ORIGIN_CHANNEL_ID, messages.NOT_SYNCED)
        assert controller.current is None

    async def test_who_replies_in_origin_channel(self, dispatcher, synced_controller, notifier):
        await dispatcher.dispatch(ChatCommand(CommandKind.WHO, ORIGIN_CHANNEL_ID))

        notifier.send.assert_awaited_once_with(ORIGIN_CHANNEL_ID, messages.who(synced_controller.current))

    async def test_list_shows_every_member(self, dispatcher, synced_controller, sent):
        await dispatcher.dispatch(ChatCommand(CommandKind.LIST, ORIGIN_CHANNEL_ID))

        text = sent()[0]
        assert text.startswith("*Current : Alice (alice)*")
        assert "Bob (bob): not yet" in text
        assert "Carol Smith (carol): not yet" in text

    async def test_done_phrase_replies_in_origin_channel(self, dispatcher, synced_controller, notifier):
        await dispatcher.dispatch(ChatCommand(CommandKind.FINISH, ORIGIN_CHANNEL_ID))

        assert notifier.send.await_args.args[0] == ORIGIN_CHANNEL_ID
        assert synced_controller.current.is_done

    async def test_fin_announces_in_default_channel(self, dispatcher, synced_controller, notifier):
        await dispatcher.dispatch(ChatCommand(CommandKind.FIN, ORIGIN_CHANNEL_ID))

        notifier.get_channel_id.assert_awaited_with("general")
        assert notifier.send.await_args.args[0] == NOTIFY_CHANNEL_ID

    async def test_change_and_zap_route_argument(self, dispatcher, synced_controller):
        await dispatcher.dispatch(ChatCommand(CommandKind.CHANGE, ORIGIN_CHANNEL_ID, "bob"))
        assert synced_controller.current.username == "bob"

        await dispatcher.dispatch(ChatCommand(CommandKind.ZAP, ORIGIN_CHANNEL_ID, "Carol Smith"))
        assert synced_controller.state.find("bob").is_done
        assert synced_controller.current.username == "carol"

    async def test_postpone_and_skip(self, dispatcher, synced_controller):
        await dispatcher.dispatch(ChatCommand(CommandKind.POSTPONE, ORIGIN_CHANNEL_ID))
        await synced_controller.drain()
        assert not synced_controller.state.find("alice").is_done

        outgoing = synced_controller.current
        await dispatcher.dispatch(ChatCommand(CommandKind.SKIP, ORIGIN_CHANNEL_ID))
        await synced_controller.drain()
        assert outgoing.is_done

    async def test_sync_event(self, dispatcher, controller, roster_payload, notifier):
        await controller.load()

        await dispatcher.dispatch(SyncUsers(roster_payload))

        assert controller.is_synced
        notifier.send.assert_awaited_once_with(NOTIFY_CHANNEL_ID, messages.assigned(controller.current))

    async def test_ticks_are_noops_before_sync(self, dispatcher, controller, notifier):
        await controller.load()

        await dispatcher.dispatch(ReminderTick())
        await dispatcher.dispatch(RotationTick())

        notifier.send.assert_not_awaited()

    async def test_reminder_tick(self, dispatcher, synced_controller, notifier, sent):
        await dispatcher.dispatch(ReminderTick())

        assert notifier.send.await_args.args[0] == NOTIFY_CHANNEL_ID
        assert "not done yet" in sent()[0]
        assert not synced_controller.current.is_done

    async def test_rotation_tick(self, dispatcher, synced_controller, sent):
        await dispatcher.dispatch(RotationTick())

        assert sent() == [messages.assigned(synced_controller.current)]

    async def test_unknown_event_is_rejected(self, dispatcher):
        with pytest.raises(TypeError):
            await dispatcher.dispatch("sync-user")
