""" Known feature bits, taken from bolts.git/09-features.md

Flags are numbered from the least-significant bit, at bit 0 (i.e. 0x1, an
_even_ bit). They are assigned in pairs so that features can be introduced as
optional (_odd_ bits) and later upgraded to be compulsory (_even_ bits), which
will be refused by outdated nodes.

 CONTEXT:
 * `I`: presented in the `init` message.
 * `N`: presented in the `node_announcement` messages.
 * `9`: presented in BOLT #11 invoices.
"""
from .feature import Feature, FeatureScope, FeatureSupport
from typing import Dict, Iterator, List, Optional, Tuple


_I = FeatureScope.INIT
_N = FeatureScope.NODE
_9 = FeatureScope.INVOICE

# CONTEXT
OPTION_DATA_LOSS_PROTECT = Feature("Data loss protect", 0, [_I, _N])                # IN
INITIAL_ROUTING_SYNC = Feature("Initial routing sync", 2, [_I])                     # I
GOSSIP_QUERIES = Feature("Basic gossip queries", 6, [_I, _N])                       # IN
VAR_ONION_OPTIN = Feature("Advanced onion", 8, [_I, _N, _9])                        # IN9
GOSSIP_QUERIES_EX = Feature("Fast graph sync", 10, [_I, _N])                        # IN
OPTION_STATIC_REMOTEKEY = Feature("Direct refund", 12, [_I, _N])                    # IN
PAYMENT_SECRET = Feature("Payment secret", 14, [_I, _N, _9])                        # IN9
BASIC_MPP = Feature("Multipart payments", 16, [_I, _N, _9])                         # IN9
OPTION_SUPPORT_LARGE_CHANNEL = Feature("Large channels", 18, [_I, _N])              # IN
OPTION_SHUTDOWN_ANYSEGWIT = Feature("Any shutdown script", 26, [_I, _N])            # IN
OPTION_PAYMENT_METADATA = Feature("Payment invoice metadata", 48, [_9])             # 9
TRAMPOLINE_PAYMENT = Feature("Trampoline payments", 50, [_I, _N, _9])               # IN9

# Experimental range, not assigned in BOLT #9.
CHAIN_SWAP = Feature("Chain swaps", 32770, [_I, _N])                                # IN
HOSTED_CHANNELS = Feature("Hosted channels", 32972, [_I, _N])                       # IN
RESIZEABLE_HOSTED_CHANNELS = Feature(
    "Resizeable Hosted channels", 32974, [_I, _N])                                  # IN


class FeatureCatalog(object):
    """A closed set of features, indexed by both of their bits.

Construction fails with a ValueError if two features claim the same bits,
since that makes decoding ambiguous.
    """
    def __init__(self, features: List[Feature]):
        self._by_mandatory: Dict[int, Feature] = {}
        self._by_optional: Dict[int, Feature] = {}

        for f in features:
            if f.mandatory in self._by_mandatory:
                raise ValueError("Duplicate feature bit {}: {} and {}".format(
                    f.mandatory, self._by_mandatory[f.mandatory].name, f.name))
            self._by_mandatory[f.mandatory] = f
            self._by_optional[f.optional] = f

    def lookup_by_mandatory_bit(self, bit: int) -> Optional[Feature]:
        return self._by_mandatory.get(bit)

    def lookup_by_optional_bit(self, bit: int) -> Optional[Feature]:
        return self._by_optional.get(bit)

    def lookup(self, bit: int) -> Optional[Tuple[Feature, FeatureSupport]]:
        """Resolve `bit` to the feature owning it and the support it signals.

Returns None if no known feature uses this bit.
        """
        f = self._by_optional.get(bit)
        if f is not None:
            return f, FeatureSupport.OPTIONAL
        f = self._by_mandatory.get(bit)
        if f is not None:
            return f, FeatureSupport.MANDATORY
        return None

    def by_scope(self, scope: FeatureScope) -> List[Feature]:
        return [f for f in self if f.in_scope(scope)]

    def __iter__(self) -> Iterator[Feature]:
        return iter(sorted(self._by_mandatory.values(), key=lambda f: f.mandatory))

    def __len__(self) -> int:
        return len(self._by_mandatory)

    def __contains__(self, f: object) -> bool:
        return isinstance(f, Feature) and self._by_mandatory.get(f.mandatory) is f


known_features = FeatureCatalog([
    OPTION_DATA_LOSS_PROTECT,
    INITIAL_ROUTING_SYNC,
    GOSSIP_QUERIES,
    VAR_ONION_OPTIN,
    GOSSIP_QUERIES_EX,
    OPTION_STATIC_REMOTEKEY,
    PAYMENT_SECRET,
    BASIC_MPP,
    OPTION_SUPPORT_LARGE_CHANNEL,
    OPTION_SHUTDOWN_ANYSEGWIT,
    OPTION_PAYMENT_METADATA,
    TRAMPOLINE_PAYMENT,
    CHAIN_SWAP,
    HOSTED_CHANNELS,
    RESIZEABLE_HOSTED_CHANNELS,
])
