# tenantsync Core Module
# Change detection and tree materialization engine

from tenantsync.core.bundle import BundleBuilder, ConfigBundle
from tenantsync.core.classifier import (
    DEFAULT_RULES,
    CategoryRule,
    Layout,
    MatchKind,
    PathClassifier,
    PathMatch,
)
from tenantsync.core.decoder import ContentDecoder
from tenantsync.core.detector import ChangeDetector
from tenantsync.core.materializer import TreeMaterializer, run_all

__all__ = [
    # Classifier
    "PathClassifier",
    "PathMatch",
    "CategoryRule",
    "Layout",
    "MatchKind",
    "DEFAULT_RULES",
    # Decoder
    "ContentDecoder",
    # Bundle
    "ConfigBundle",
    "BundleBuilder",
    # Engine
    "ChangeDetector",
    "TreeMaterializer",
    "run_all",
]
