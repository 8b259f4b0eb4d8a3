#!/usr/bin/env python3
"""
Print the pro forma summary of an exported project file.

Usage:
    python scripts/proforma_report.py Terrace-Way.json
    python scripts/proforma_report.py            # default assumptions
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.calculations.formatting import summary_lines
from app.calculations.proforma import compute_proforma
from app.schemas.project import Project
from app.services.projects import ProjectFormatError, parse_project


def main(argv):
    if len(argv) > 1:
        try:
            with open(argv[1], encoding="utf-8") as f:
                project = parse_project(f.read())
        except (OSError, ProjectFormatError) as e:
            print(f"Error: {e}")
            return 1
    else:
        project = Project()

    result = compute_proforma(
        project.inputs, project.renovation_items, project.financing_sources
    )

    print(project.project_name)
    print("=" * len(project.project_name))
    lines = summary_lines(result)
    width = max(len(label) for label, _ in lines)
    for label, value in lines:
        print(f"{label:<{width}}  {value:>12}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
