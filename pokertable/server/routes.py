"""
HTTP API Routes for PokerTable.

Single-table mode: one TexasHoldemGame per process, configured from the
POKERTABLE_* environment variables on first use.
"""

from typing import Dict, Any, Optional
from fastapi import APIRouter, HTTPException
import logging

from pokertable.agents import agent_for_personality, consult_advisor
from pokertable.core.errors import InvalidAction
from pokertable.core.game import TexasHoldemGame, ActionResult
from pokertable.core.rules import ActionType, GameConfig
from pokertable.server.schemas import StartHandRequest, ActionRequest, AdvisoryRequest

router = APIRouter()
logger = logging.getLogger(__name__)

# Global game instance for single-table mode
_game: Optional[TexasHoldemGame] = None


def get_game() -> TexasHoldemGame:
    """Get the table, creating it on first use."""
    global _game
    if _game is None:
        _game = TexasHoldemGame(GameConfig.from_env())
        logger.info(f"Created table (blinds {_game.config.small_blind}/{_game.config.big_blind})")
    return _game


def _hand_result(game: TexasHoldemGame) -> Dict[str, Any]:
    """Winners, revealed cards and board of the finished hand."""
    state = game.state
    winners = []
    for payout in game.get_winners():
        player = state.get_player(payout.player_id)
        winners.append({
            **payout.to_dict(),
            "stack": player.stack if player else 0,
        })

    return {
        "winners": winners,
        "players_cards": [
            {"id": p.player_id, "cards": [card.to_dict() for card in p.hole_cards]}
            for p in state.players
            if p.hole_cards
        ],
        "board": [card.to_dict() for card in state.community_cards],
        "rounding_loss": state.rounding_loss,
    }


def _action_response(game: TexasHoldemGame, result: ActionResult) -> Dict[str, Any]:
    if not result.success:
        return {"error": result.message}

    response: Dict[str, Any] = {
        "success": True,
        "message": result.message,
        "action_type": result.action_type.value if result.action_type else None,
        "amount": result.amount,
        "phase": game.phase.name,
    }
    if not game.is_hand_running():
        response.update(_hand_result(game))
    return response


@router.post("/start_hand")
async def start_hand(req: Optional[StartHandRequest] = None) -> Dict[str, Any]:
    """
    Start a new hand.

    Seats the roster (if given), posts blinds and deals hole cards.
    """
    game = get_game()
    req = req or StartHandRequest()

    try:
        game.start_hand(
            roster=req.roster,
            stacks=req.stacks,
            small_blind=req.small_blind,
            big_blind=req.big_blind,
            advisory=req.advisory,
        )
    except (ValueError, InvalidAction) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "message": f"Hand #{game.state.hand_number} started",
        "hand_number": game.state.hand_number,
        "current_player": game.state.active_player_id,
    }


@router.get("/get_game_state")
async def get_game_state(player_id: Optional[str] = None, reveal: bool = False) -> Dict[str, Any]:
    """
    Get the current game state.

    Private cards are included for ``player_id`` (default: the participant to act).
    """
    game = get_game()
    for_player_id = player_id or game.state.active_player_id
    return game.get_state(for_player_id=for_player_id, reveal_all=reveal)


@router.post("/take_action")
async def take_action(req: ActionRequest) -> Dict[str, Any]:
    """
    Take a game action.

    Rejected actions leave the table unchanged and return {"error": reason}.
    If the hand ends, the response includes the winners.
    """
    game = get_game()

    try:
        action_type = ActionType(req.action_type.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid action type: {req.action_type}")

    player_id = req.player_id or game.state.active_player_id
    if player_id is None:
        return {"error": "No participant to act"}

    result = game.propose_action(player_id, action_type, req.amount)
    return _action_response(game, result)


@router.post("/advance")
async def advance() -> Dict[str, Any]:
    """Deal the next street once the betting round is complete (manual mode)."""
    game = get_game()
    game.advance_if_round_complete()

    response: Dict[str, Any] = {"success": True, "phase": game.phase.name}
    if game.state.hand_number and not game.is_hand_running():
        response.update(_hand_result(game))
    return response


@router.get("/legal_actions")
async def get_legal_actions(player_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Get legal actions for a participant (default: the one to act).
    """
    game = get_game()

    if not game.is_hand_running():
        return {"actions": [], "message": "No hand in progress"}

    actions = game.get_legal_actions(player_id)
    return {"actions": actions, "player_id": player_id or game.state.active_player_id}


@router.post("/advisory/{player_id}")
async def advisory_action(player_id: str, req: Optional[AdvisoryRequest] = None) -> Dict[str, Any]:
    """
    Let an advisory-controlled seat act.

    The seat's personality agent decides; a failed decision folds the seat.
    """
    game = get_game()
    participant = game.state.get_player(player_id)
    if participant is None:
        raise HTTPException(status_code=404, detail=f"Unknown player: {player_id}")

    agent = agent_for_personality(participant.personality, player_id)
    timeout = req.timeout if req else None

    try:
        result = await consult_advisor(game, player_id, agent, timeout=timeout)
    except InvalidAction as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _action_response(game, result)


@router.post("/reset_game")
async def reset_game() -> Dict[str, Any]:
    """
    Reset the table (for development/testing).
    """
    global _game
    _game = None
    return {"success": True, "message": "Game reset"}
