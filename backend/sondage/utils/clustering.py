"""
Answer clustering for exports and reports.

Groups an answer multiset into display clusters with a representative label
and a summed count.
"""
import logging
from typing import Any, Dict, List

from .similarity import are_similar

logger = logging.getLogger(__name__)


def cluster_answers(answers: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Fold answers into clusters of similar answers.

    Items are processed in the given order. Each item joins the first open
    cluster whose current label is similar to it, and takes over the label
    when its own count beats the largest count seen in that cluster. Items
    are only compared with a cluster's current label, not with every past
    member, so the result can depend on input order. Similarity follows
    are_similar, where an empty deep key is not a prefix of any other key.

    Args:
        answers: ``{"answer", "count"}`` dicts

    Returns:
        List[Dict[str, Any]]: ``{"answer", "count"}`` clusters, largest first
    """
    clusters: List[Dict[str, Any]] = []

    for item in answers:
        for cluster in clusters:
            if are_similar(cluster["canonical"], item["answer"]):
                cluster["total"] += item["count"]
                if item["count"] > cluster["max_count"]:
                    cluster["canonical"] = item["answer"]
                    cluster["max_count"] = item["count"]
                break
        else:
            clusters.append({
                "canonical": item["answer"],
                "total": item["count"],
                "max_count": item["count"],
            })

    logger.debug(f"Clustered {len(answers)} answers into {len(clusters)} clusters")

    ordered = sorted(clusters, key=lambda c: c["total"], reverse=True)
    return [{"answer": c["canonical"], "count": c["total"]} for c in ordered]
