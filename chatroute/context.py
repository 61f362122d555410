"""Per-request context threaded through a listener chain."""

from __future__ import annotations

from typing import Any

# Keys set upstream by the authorize step
BOT_ID = "bot_id"
BOT_USER_ID = "bot_user_id"

# Keys written by built-in middleware.  Only the named writer may set them:
#   block_id_matches / action_id_matches / callback_id_matches -> match_constraints
#   matches -> match_message
BLOCK_ID_MATCHES = "block_id_matches"
ACTION_ID_MATCHES = "action_id_matches"
CALLBACK_ID_MATCHES = "callback_id_matches"
MATCHES = "matches"


class Context(dict[str, Any]):
    """Mutable key/value store shared by every link of one chain run.

    A new instance is created for each incoming request; writes made by an
    earlier middleware are visible to later ones and to the handler.
    """

    @property
    def bot_id(self) -> str | None:
        return self.get(BOT_ID)

    @property
    def bot_user_id(self) -> str | None:
        return self.get(BOT_USER_ID)

    def __repr__(self) -> str:
        return f"Context({dict.__repr__(self)})"
