"""
Export service for survey results.

This module turns the grouped answer rows of every question into clustered
report rows and renders them as the CSV file downloaded from the admin panel.
"""
import csv
import io
import logging
from itertools import groupby
from typing import Any, Dict, List

from sondage.utils.clustering import cluster_answers
from sondage.utils.rounding import percentage

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"
CSV_HEADER = ["Catégorie", "Question", "Réponse", "Nombre", "Pourcentage"]
CSV_BOM = "\ufeff"


def cluster_question_answers(answers: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Cluster one question's answers and attach percentages.

    Args:
        answers: ``{"answer", "count"}`` dicts for a single question

    Returns:
        List[Dict[str, Any]]: ``{"answer", "count", "percentage"}`` dicts,
        largest cluster first
    """
    clusters = cluster_answers(answers)
    total = sum(c["count"] for c in clusters)
    return [
        {
            "answer": c["answer"],
            "count": c["count"],
            "percentage": percentage(c["count"], total),
        }
        for c in clusters
    ]


def build_export_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Cluster the export rows question by question.

    Args:
        rows: Rows from the persistence layer, ordered by question, each with
            ``question_id``, ``category``, ``question``, ``answer`` and ``count``

    Returns:
        List[Dict[str, Any]]: One row per cluster with ``category``,
        ``question``, ``answer``, ``count`` and ``percentage``
    """
    report: List[Dict[str, Any]] = []
    for _, group in groupby(rows, key=lambda r: r["question_id"]):
        group = list(group)
        first = group[0]
        clusters = cluster_question_answers(
            [{"answer": r["answer"], "count": r["count"]} for r in group]
        )
        logger.debug(f"Question {first['question_id']}: {len(group)} answers -> {len(clusters)} clusters")
        for cluster in clusters:
            report.append({
                "category": first["category"],
                "question": first["question"],
                **cluster,
            })
    return report


def render_csv(report: List[Dict[str, Any]]) -> str:
    """
    Render clustered export rows as a semicolon-separated CSV document.

    Args:
        report: Rows from build_export_rows

    Returns:
        str: CSV text, prefixed with a UTF-8 byte order mark for spreadsheets
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in report:
        writer.writerow([
            row["category"],
            row["question"],
            row["answer"],
            row["count"],
            f"{row['percentage']}%",
        ])
    return CSV_BOM + buffer.getvalue()
