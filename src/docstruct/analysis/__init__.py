from .analyzer import (
    AnalysisResult,
    StructureAnalyzer,
    TreeNode,
    generate_tree,
    meets_quality_threshold,
)

__all__ = [
    "AnalysisResult",
    "StructureAnalyzer",
    "TreeNode",
    "generate_tree",
    "meets_quality_threshold",
]
