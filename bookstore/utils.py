# bookstore/utils.py
import math


def decade_of(year):
    """Return the decade a year falls in, e.g. 1937 -> 1930."""
    return int(math.floor(year / 10) * 10)


def page_offset(page, page_size):
    """
    Number of documents to skip for a 1-based page.

    Raises:
        ValueError: if page or page_size is below 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return (page - 1) * page_size


def plan_stages(plan):
    """
    Collect every stage name of a query plan, outermost first.

    Walks the nested plan tree produced by explain(): single children under
    inputStage, multiple children under inputStages, and the queryPlan
    wrapper newer servers put around slot-based execution plans.

    Args:
        plan (dict): A winningPlan document (or any sub-tree of one)

    Returns:
        list[str]: Stage names such as ["FETCH", "IXSCAN"] or ["COLLSCAN"]
    """
    stages = []
    if not isinstance(plan, dict):
        return stages
    if "stage" in plan:
        stages.append(plan["stage"])
    if "queryPlan" in plan:
        stages.extend(plan_stages(plan["queryPlan"]))
    if "inputStage" in plan:
        stages.extend(plan_stages(plan["inputStage"]))
    for child in plan.get("inputStages", []):
        stages.extend(plan_stages(child))
    return stages


def uses_index(plan):
    """True when the plan reads through an index scan."""
    return "IXSCAN" in plan_stages(plan)
