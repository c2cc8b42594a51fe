"""Routes for the brackets blueprint."""

from __future__ import annotations

import random
from typing import Any, Optional

from flask import current_app, jsonify, request

from karatebracket.auth import current_viewer, login_required
from karatebracket.errors import ValidationError

from . import bp
from .models import (
    MatchDetailsSubmission,
    OrderChange,
    ResultSubmission,
    SlotSwap,
    optional_int,
)
from .services import BracketService


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def _expected_version(payload: dict[str, Any]) -> Optional[int]:
    return optional_int(payload.get("expectedVersion"), "expectedVersion")


def _seeding_rng() -> Optional[random.Random]:
    seed = current_app.config.get("BRACKET_RANDOM_SEED")
    if seed is None or seed == "":
        return None
    return random.Random(seed)


@bp.route("/generate", methods=["POST"])
@login_required(admin_required=True)
def generate_brackets() -> Any:
    """Generate brackets for every active category without one."""
    viewer = current_viewer()
    results = BracketService.generate_all(
        viewer["uid"],
        rng=_seeding_rng(),
        token_bytes=current_app.config["PUBLIC_TOKEN_BYTES"],
    )
    current_app.logger.info(
        f"Bracket generation by {viewer['uid']}: "
        f"{len(results['generated'])} generated, "
        f"{len(results['warnings'])} warnings, {len(results['errors'])} errors"
    )
    return jsonify(results)


@bp.route("", methods=["GET"])
@login_required
def list_brackets() -> Any:
    """List the brackets visible to the signed-in user."""
    return jsonify(BracketService.list_brackets(current_viewer()))


@bp.route("/public/<string:token>", methods=["GET"])
def public_bracket(token: str) -> Any:
    """Read-only bracket view for anyone holding the share token."""
    return jsonify(BracketService.get_public_bracket(token))


@bp.route("/<string:bracket_id>", methods=["GET"])
@login_required
def view_bracket(bracket_id: str) -> Any:
    """View a single bracket with competitor details."""
    return jsonify(BracketService.get_bracket_for_viewer(bracket_id, current_viewer()))


@bp.route(
    "/<string:bracket_id>/match/<int:round_number>/<int:match_number>",
    methods=["PUT"],
)
@login_required(admin_required=True)
def record_result(bracket_id: str, round_number: int, match_number: int) -> Any:
    """Record the winner of a match."""
    submission = ResultSubmission.from_json(_json_body())
    bracket = BracketService.record_result(
        bracket_id,
        round_number,
        match_number,
        submission,
        strict=current_app.config["BRACKET_STRICT_WINNER"],
    )
    current_app.logger.info(
        f"Result recorded on bracket {bracket_id} round {round_number} "
        f"match {match_number} by {current_viewer()['uid']}"
    )
    return jsonify(bracket)


@bp.route(
    "/<string:bracket_id>/match/<int:round_number>/<int:match_number>",
    methods=["PATCH"],
)
@login_required(admin_required=True)
def update_match(bracket_id: str, round_number: int, match_number: int) -> Any:
    """Assign a tatami, add notes or start a match."""
    submission = MatchDetailsSubmission.from_json(_json_body())
    bracket = BracketService.update_match_details(
        bracket_id, round_number, match_number, submission
    )
    return jsonify(bracket)


@bp.route("/<string:bracket_id>/reset", methods=["PUT"])
@login_required(admin_required=True)
def reset_bracket(bracket_id: str) -> Any:
    """Clear every result of a bracket."""
    payload = _json_body()
    bracket = BracketService.reset_bracket(
        bracket_id, expected_version=_expected_version(payload)
    )
    current_app.logger.info(
        f"Bracket {bracket_id} reset by {current_viewer()['uid']}"
    )
    return jsonify(bracket)


@bp.route("/<string:bracket_id>/pairings", methods=["PUT"])
@login_required(admin_required=True)
def swap_pairings(bracket_id: str) -> Any:
    """Swap competitors between matches."""
    payload = _json_body()
    bracket = BracketService.swap_pairings(
        bracket_id,
        SlotSwap.list_from_json(payload),
        expected_version=_expected_version(payload),
    )
    current_app.logger.info(
        f"Pairings edited on bracket {bracket_id} by {current_viewer()['uid']}"
    )
    return jsonify(bracket)


@bp.route("/<string:bracket_id>/order", methods=["PUT"])
@login_required(admin_required=True)
def reorder_matches(bracket_id: str) -> Any:
    """Change the execution order of matches in a round."""
    payload = _json_body()
    round_number = optional_int(payload.get("round"), "round")
    if round_number is None:
        raise ValidationError("'round' is required.")
    bracket = BracketService.reorder_matches(
        bracket_id,
        round_number,
        OrderChange.list_from_json(payload),
        expected_version=_expected_version(payload),
    )
    return jsonify(bracket)


@bp.route("/<string:bracket_id>/duplicate", methods=["POST"])
@login_required(admin_required=True)
def duplicate_bracket(bracket_id: str) -> Any:
    """Copy a bracket onto another category."""
    payload = _json_body()
    viewer = current_viewer()
    bracket = BracketService.duplicate_bracket(
        bracket_id,
        payload.get("targetCategoryId") or "",
        viewer["uid"],
        token_bytes=current_app.config["PUBLIC_TOKEN_BYTES"],
    )
    current_app.logger.info(
        f"Bracket {bracket_id} duplicated to {bracket['id']} by {viewer['uid']}"
    )
    return jsonify(bracket), 201


@bp.route("/<string:category_id>", methods=["DELETE"])
@login_required(admin_required=True)
def delete_bracket(category_id: str) -> Any:
    """Delete a category's bracket so it can be generated again."""
    BracketService.delete_bracket(category_id)
    current_app.logger.info(
        f"Bracket for category {category_id} deleted by {current_viewer()['uid']}"
    )
    return jsonify({"message": "Bracket deleted."})
