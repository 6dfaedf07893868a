"""Decide whether two peers can talk to each other.

These only report; what to do with an incompatible peer (e.g. send an
`error` and disconnect) is up to the caller.
"""
from .feature import Feature, FeatureSupport
from .features import Features
from typing import List
import logging


logger = logging.getLogger(__name__)


def missing_features(receiver: Features, sender: Features) -> List[int]:
    """Return the bits `sender` sets that `receiver` cannot honour.

These are the mandatory bits of features `receiver` does not activate, and
any unknown even bits. An empty list means `sender` is supported.
    """
    missing = [f.mandatory for f, sup in sender.activated.items()
               if sup is FeatureSupport.MANDATORY and not receiver.has_feature(f)]
    missing += [u.bit_index for u in sender.unknown if not u.is_odd()]
    return sorted(missing)


def is_supported_by(receiver: Features, sender: Features) -> bool:
    """Does `receiver` understand everything `sender` requires?

This is directional: `receiver`'s own unknown bits are not looked at.
    """
    ok = receiver.are_supported(sender)
    if not ok:
        logger.debug("Unsupported feature bits %s", missing_features(receiver, sender))
    return ok


def are_compatible(ours: Features, theirs: Features) -> bool:
    """Both sides must support what the other requires"""
    return is_supported_by(ours, theirs) and is_supported_by(theirs, ours)


def can_use_feature(local: Features, remote: Features, feature: Feature) -> bool:
    # Either side may have it as optional.
    return local.has_feature(feature) and remote.has_feature(feature)
