"""
Advisory decision boundary.

Drives one request -> response -> proposal cycle for an advisory seat:

    result = await consult_advisor(game, "bot-1", agent)

The ``decide`` callable only produces an answer. The answer re-enters the
engine as an ordinary, validated proposal; anything that goes wrong on the
way (exception, timeout, malformed or illegal answer) folds the seat.
"""

import asyncio
import inspect
import logging
from typing import Any, Mapping, Optional, Tuple

from pokertable.agents.base import Decide
from pokertable.core.errors import AdvisoryFailure
from pokertable.core.game import ActionResult, DecisionRequest, TexasHoldemGame
from pokertable.core.rules import ActionType


logger = logging.getLogger(__name__)


def parse_decision(answer: Any, player_id: str = "") -> Tuple[ActionType, Optional[int]]:
    """
    Normalize an advisory answer to ``(ActionType, amount)``.

    Accepts an ``(action, amount)`` pair, a bare action, or a mapping with
    ``action`` (or ``type``) and ``amount`` keys.

    Raises:
        AdvisoryFailure: If the answer cannot be read as an action
    """
    amount: Any = None
    if isinstance(answer, Mapping):
        action = answer.get("action", answer.get("type"))
        amount = answer.get("amount")
    elif isinstance(answer, (tuple, list)):
        if len(answer) != 2:
            raise AdvisoryFailure(player_id, f"malformed decision: {answer!r}")
        action, amount = answer
    else:
        action = answer

    if isinstance(action, ActionType):
        action_type = action
    elif isinstance(action, str):
        try:
            action_type = ActionType(action.upper())
        except ValueError:
            raise AdvisoryFailure(player_id, f"unknown action: {action!r}") from None
    else:
        raise AdvisoryFailure(player_id, f"malformed decision: {answer!r}")

    if action_type != ActionType.RAISE:
        return action_type, None
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise AdvisoryFailure(player_id, f"raise needs an integer amount, got {amount!r}")
    return action_type, amount


async def _ask(decide: Decide, request: DecisionRequest) -> Any:
    args = (request.participant, request.state, request.action_log)
    if inspect.iscoroutinefunction(decide) or inspect.iscoroutinefunction(getattr(decide, "__call__", None)):
        return await decide(*args)

    answer = await asyncio.to_thread(decide, *args)
    if inspect.isawaitable(answer):
        answer = await answer
    return answer


async def consult_advisor(
    game: TexasHoldemGame,
    player_id: str,
    decide: Decide,
    timeout: Optional[float] = None,
) -> ActionResult:
    """
    Ask ``decide`` for the participant's action and apply it.

    Args:
        game: The table
        player_id: Advisory-controlled participant whose turn it is
        decide: Decision function (sync or async)
        timeout: Seconds to wait (defaults to ``game.config.advisory_timeout``;
            None waits forever)

    Returns:
        The ActionResult of the applied action (the fold, on failure)

    Raises:
        InvalidAction: If the decision cannot be requested (another one is
            in flight, wrong participant, ...)
    """
    request = game.request_decision(player_id)
    if timeout is None:
        timeout = game.config.advisory_timeout

    try:
        answer = await asyncio.wait_for(_ask(decide, request), timeout)
        action, amount = parse_decision(answer, player_id)
    except asyncio.CancelledError:
        game.cancel_decision(request)
        raise
    except AdvisoryFailure as exc:
        return game.fail_decision(request, exc)
    except asyncio.TimeoutError:
        return game.fail_decision(request, AdvisoryFailure(player_id, f"no answer within {timeout}s"))
    except Exception as exc:
        return game.fail_decision(request, AdvisoryFailure(player_id, repr(exc)))

    logger.debug(f"Advisory answer for {player_id}: {action.value} {amount or ''}".rstrip())
    return game.resolve_decision(request, action, amount)
