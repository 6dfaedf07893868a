from enum import Enum
from typing import FrozenSet, Iterable


class FeatureSupport(Enum):
    """How strongly a peer signals a feature.

BOLT #9: the even bit of a pair means the feature is required (mandatory),
the odd bit means the feature is supported but optional.
    """
    MANDATORY = 'mandatory'
    OPTIONAL = 'optional'

    def __str__(self):
        return self.value


class FeatureScope(Enum):
    """The messages a feature may be presented in.

The values match the `featurebits` keys used in plugin manifests.
    """
    INIT = 'init'
    NODE = 'node'
    INVOICE = 'invoice'

    def __str__(self):
        return self.value


class Feature(object):
    """A known feature, owning the bit pair (mandatory, mandatory + 1).

Instances are only created by the catalog in `pyln.features.catalog`, and
compare equal by their mandatory bit.
    """
    __slots__ = ('_name', '_mandatory', '_scopes')

    def __init__(self, name: str, mandatory: int, scopes: Iterable[FeatureScope]):
        if not isinstance(mandatory, int) or mandatory < 0:
            raise ValueError("{}: mandatory bit must be a non-negative integer, got {!r}"
                             .format(name, mandatory))
        if mandatory % 2 != 0:
            raise ValueError("{}: mandatory bit must be even, got {}"
                             .format(name, mandatory))
        self._name = name
        self._mandatory = mandatory
        self._scopes = frozenset(scopes)

    @property
    def name(self) -> str:
        return self._name

    @property
    def mandatory(self) -> int:
        return self._mandatory

    @property
    def optional(self) -> int:
        return self._mandatory + 1

    @property
    def scopes(self) -> FrozenSet[FeatureScope]:
        return self._scopes

    def support_bit(self, support: FeatureSupport) -> int:
        """Return the bit index signalling this feature at `support`"""
        if support is FeatureSupport.MANDATORY:
            return self.mandatory
        elif support is FeatureSupport.OPTIONAL:
            return self.optional
        raise TypeError("support must be a FeatureSupport, {} received"
                        .format(type(support)))

    def in_scope(self, scope: FeatureScope) -> bool:
        return scope in self._scopes

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Feature) and self.mandatory == other.mandatory

    def __hash__(self):
        return hash(('Feature', self._mandatory))

    def __str__(self):
        return self._name

    def __repr__(self):
        return "Feature[{}, bits={}/{}]".format(self._name, self.mandatory,
                                                self.optional)


class UnknownFeature(object):
    """A set bit we could not map to a known feature.

These are kept around so we can re-encode what a peer sent us.
    """
    __slots__ = ('_bit_index',)

    def __init__(self, bit_index: int):
        if not isinstance(bit_index, int) or isinstance(bit_index, bool):
            raise TypeError("bit_index must be int, {} received"
                            .format(type(bit_index)))
        if bit_index < 0:
            raise ValueError("bit_index must be non-negative, got {}"
                             .format(bit_index))
        self._bit_index = bit_index

    @property
    def bit_index(self) -> int:
        return self._bit_index

    def is_odd(self) -> bool:
        # It's ok to be odd.
        return self._bit_index % 2 == 1

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UnknownFeature) and self.bit_index == other.bit_index

    def __hash__(self):
        return hash(('UnknownFeature', self._bit_index))

    def __lt__(self, other: 'UnknownFeature') -> bool:
        return self.bit_index < other.bit_index

    def __repr__(self):
        return "UnknownFeature[{}]".format(self._bit_index)
