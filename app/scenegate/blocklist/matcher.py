"""Matching of live scene objects against blocklist targets.

Several objects in a world can share a name, so a target may narrow the
match with a local position, a parent, or both. Positions in blocklist
files are doubles while the asset stores single-precision floats; every
comparison narrows the configured value to single precision first.
"""

import math
import struct

from scenegate.assets.store import SceneObject, SceneTransform
from scenegate.models.blocklist import GameObjectInstance, GameObjectPosition

_FLOAT32 = struct.Struct("<f")


def to_float32(value: float) -> float:
    """Round a double to the nearest single-precision value.

    Values beyond the single-precision range become infinities of the
    same sign, which no finite live position equals.
    """
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def position_matches(reference: GameObjectPosition, live: tuple[float, float, float]) -> bool:
    """Compare a configured position with a live local position.

    Args:
        reference: Position from the blocklist (double precision).
        live: Local position read from the asset.

    Returns:
        True if every component is equal at single precision.
    """
    expected = (reference.x, reference.y, reference.z)
    return all(
        to_float32(want) == to_float32(have) for want, have in zip(expected, live, strict=True)
    )


def parent_matches(parent: GameObjectInstance, father: SceneTransform | None) -> bool:
    """Check a transform's father against a parent description.

    The parent's own position and parent, when given, are checked the
    same way up the hierarchy.

    Args:
        parent: Expected parent from the blocklist.
        father: The candidate's father transform, None for root objects.

    Returns:
        True if the father satisfies every constraint in ``parent``.
    """
    if father is None:
        return False
    if parent.position is not None and not position_matches(
        parent.position, father.local_position
    ):
        return False
    if father.game_object().name != parent.name:
        return False
    if parent.parent is not None:
        return parent_matches(parent.parent, father.father())
    return True


def object_matches(obj: SceneObject, target: GameObjectInstance) -> bool:
    """Decide whether a scene object should be deactivated for a target.

    Inactive objects never match. Without position or parent constraints
    the name alone decides. Otherwise each transform is tried in turn: a
    transform at the wrong position is passed over, but a transform at
    the right position whose parent does not match rejects the object.

    Args:
        obj: Live scene object.
        target: Blocklist entry.

    Returns:
        True if the object matches the target.
    """
    if not obj.active or obj.name != target.name:
        return False
    if target.is_name_only:
        return True

    matched = False
    for transform in obj.transforms():
        if target.position is not None and not position_matches(
            target.position, transform.local_position
        ):
            continue
        if target.parent is not None and not parent_matches(target.parent, transform.father()):
            return False
        matched = True
    return matched
