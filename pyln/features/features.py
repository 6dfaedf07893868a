from .catalog import FeatureCatalog, known_features
from .feature import Feature, FeatureScope, FeatureSupport, UnknownFeature
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Set, Tuple, Union
import logging


logger = logging.getLogger(__name__)


class Features(object):
    """An immutable set of activated features plus any bits we didn't know.

`activated` maps each known `Feature` to the `FeatureSupport` it is
signalled with, `unknown` holds the bits that matched no known feature. A bit
is either owned by an activated feature or unknown, never both.

All operations return new instances, so these can be shared freely.
    """
    __slots__ = ('_activated', '_unknown', '_catalog')

    def __init__(self,
                 activated: Optional[Mapping[Feature, FeatureSupport]] = None,
                 unknown: Iterable[Union[UnknownFeature, int]] = (),
                 catalog: FeatureCatalog = known_features):
        acts: Dict[Feature, FeatureSupport] = {}
        for f, sup in (activated or {}).items():
            if not isinstance(f, Feature):
                raise TypeError("activated keys must be Feature, {} received"
                                .format(type(f)))
            if not isinstance(sup, FeatureSupport):
                raise TypeError("activated values must be FeatureSupport, {} received"
                                .format(type(sup)))
            acts[f] = sup

        unk = frozenset(u if isinstance(u, UnknownFeature) else UnknownFeature(u)
                        for u in unknown)

        known = sorted(u.bit_index for u in unk if catalog.lookup(u.bit_index) is not None)
        if known:
            raise ValueError("Unknown bits {} belong to known features"
                             .format(known))

        owned = {f.support_bit(sup) for f, sup in acts.items()}
        clash = sorted(u.bit_index for u in unk if u.bit_index in owned)
        if clash:
            raise ValueError("Unknown bits {} are already set by activated features"
                             .format(clash))

        self._activated = acts
        self._unknown = unk
        self._catalog = catalog

    @classmethod
    def empty(cls) -> 'Features':
        return cls()

    @classmethod
    def of(cls, *features: Tuple[Feature, FeatureSupport]) -> 'Features':
        """Build from `(feature, support)` pairs, e.g.

    Features.of((PAYMENT_SECRET, FeatureSupport.MANDATORY),
                (BASIC_MPP, FeatureSupport.OPTIONAL))
        """
        return cls(dict(features))

    @classmethod
    def from_bits(cls, bits: Iterable[int],
                  catalog: FeatureCatalog = known_features) -> 'Features':
        """Resolve raw bit indices against `catalog`.

Each bit becomes an optional feature if it is some feature's odd bit, a
mandatory one if it is some feature's even bit, and an unknown bit otherwise.
        """
        activated: Dict[Feature, FeatureSupport] = {}
        unknown: Set[UnknownFeature] = set()
        for b in bits:
            found = catalog.lookup(b)
            if found is None:
                logger.debug("Unknown feature bit %d", b)
                unknown.add(UnknownFeature(b))
                continue
            f, sup = found
            # Optional wins if both bits of a pair are set.
            if activated.get(f) is FeatureSupport.OPTIONAL:
                continue
            activated[f] = sup
        return cls(activated, unknown, catalog)

    @property
    def activated(self) -> Mapping[Feature, FeatureSupport]:
        return MappingProxyType(self._activated)

    @property
    def unknown(self) -> frozenset:
        return self._unknown

    def has_feature(self, feature: Feature,
                    support: Optional[FeatureSupport] = None) -> bool:
        if support is None:
            return feature in self._activated
        return self._activated.get(feature) is support

    def bits(self) -> Set[int]:
        """All bit indices set by this feature set"""
        ret = {f.support_bit(sup) for f, sup in self._activated.items()}
        ret.update(u.bit_index for u in self._unknown)
        return ret

    def are_supported(self, remote: 'Features') -> bool:
        """Can we accept a peer that sent us `remote`?

Every feature the remote requires must be activated here, at any level, and
any unknown bit the remote sets must be odd. Only the remote's unknown bits
are checked: it is up to the remote to check ours.
        """
        for f, sup in remote._activated.items():
            if sup is FeatureSupport.MANDATORY and f not in self._activated:
                return False
        return all(u.is_odd() for u in remote._unknown)

    def filter_by_scope(self, scope: FeatureScope) -> 'Features':
        return Features({f: sup for f, sup in self._activated.items()
                         if f.in_scope(scope)},
                        self._unknown, self._catalog)

    def init_features(self) -> 'Features':
        return self.filter_by_scope(FeatureScope.INIT)

    def node_announcement_features(self) -> 'Features':
        return self.filter_by_scope(FeatureScope.NODE)

    def invoice_scoped_features(self) -> 'Features':
        return self.filter_by_scope(FeatureScope.INVOICE)

    def invoice_features(self) -> Dict[Feature, FeatureSupport]:
        # Invoices never carry unknown bits.
        return {f: sup for f, sup in self._activated.items()
                if f.in_scope(FeatureScope.INVOICE)}

    def __bool__(self):
        return bool(self._activated) or bool(self._unknown)

    def __len__(self):
        return len(self._activated) + len(self._unknown)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Features):
            return False
        return (self._activated == other._activated
                and self._unknown == other._unknown)

    def __hash__(self):
        return hash((frozenset(self._activated.items()), self._unknown))

    def __str__(self):
        parts = ["{}={}".format(f.name, sup)
                 for f, sup in sorted(self._activated.items(),
                                      key=lambda i: i[0].mandatory)]
        parts += ["unknown={}".format(u.bit_index) for u in sorted(self._unknown)]
        return "Features[{}]".format(", ".join(parts))

    def __repr__(self):
        return str(self)
