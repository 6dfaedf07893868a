from .feature import Feature, FeatureScope, FeatureSupport, UnknownFeature
from .catalog import FeatureCatalog, known_features
from .features import Features
from .codec import encode, decode, from_featurebits
from .compat import are_compatible, can_use_feature, is_supported_by, missing_features

__version__ = "0.1.0"

__all__ = [
    "Feature",
    "FeatureCatalog",
    "FeatureScope",
    "FeatureSupport",
    "Features",
    "UnknownFeature",
    "are_compatible",
    "can_use_feature",
    "decode",
    "encode",
    "from_featurebits",
    "is_supported_by",
    "known_features",
    "missing_features",
    "__version__",
]
