"""Proof-mode session: the pinned target and its current unfold depth.

The session is a plain value owned by the caller. Every function here returns
a new session and leaves its argument alone.
"""

import logging
import re

from proofpath.graph.index import GraphIndex
from proofpath.graph.subgraph import clamp_depth, max_prereq_depth, select_subgraph
from proofpath.models import ProofSession

logger = logging.getLogger(__name__)

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def enter_proof_mode(index: GraphIndex, target_id: str) -> ProofSession:
    """Pin ``target_id`` and select its immediate prerequisites."""
    if target_id not in index:
        raise ValueError(f"Node not found: {target_id}")
    logger.info("Entering proof mode for %s", target_id)
    return ProofSession(
        pinned_id=target_id,
        target_id=target_id,
        depth=1,
        subgraph=select_subgraph(target_id, 1, index),
    )


def set_depth(session: ProofSession, index: GraphIndex, depth: int) -> ProofSession:
    depth = clamp_depth(depth, max_prereq_depth(session.target_id, index))
    return session.model_copy(update={
        "depth": depth,
        "subgraph": select_subgraph(session.target_id, depth, index),
    })


def unfold_more(session: ProofSession, index: GraphIndex) -> ProofSession:
    return set_depth(session, index, session.depth + 1)


def unfold_less(session: ProofSession, index: GraphIndex) -> ProofSession:
    return set_depth(session, index, session.depth - 1)


def change_target(session: ProofSession | None, index: GraphIndex, target_id: str) -> ProofSession:
    """Switch the pinned target; the old selection is simply discarded."""
    return enter_proof_mode(index, target_id)


def exit_proof_mode(session: ProofSession | None) -> None:
    if session is not None:
        logger.info("Leaving proof mode for %s", session.target_id)
    return None


def restore_session(
    index: GraphIndex, target_id: str | None, depth: str | int | None = None,
) -> ProofSession | None:
    """Rebuild a session from a shared link's ``target`` / ``depth`` values.

    Unknown targets give None. The depth is read from its leading digits, so
    "2.5" means 2; a missing or unparsable depth falls back to 1.
    """
    if not target_id or target_id not in index:
        return None
    match = LEADING_INT_RE.match(str(depth)) if depth is not None else None
    parsed = int(match.group(1)) if match else 1
    if parsed < 1:
        parsed = 1
    return set_depth(enter_proof_mode(index, target_id), index, parsed)
