# queries/reporter.py
from bson import json_util
import pandas as pd


def format_table(rows, columns=None):
    """
    Render result documents as a plain-text table.

    Args:
        rows (list[dict]): Documents or already-shaped rows
        columns (list[str], optional): Column order; keys not listed are
            dropped. Defaults to the keys found in the rows.

    Returns:
        str: The table text, or "(no documents)" for an empty result
    """
    if not rows:
        return "(no documents)"
    df = pd.DataFrame(rows, columns=columns)
    if "_id" in df.columns:
        df["_id"] = df["_id"].astype(str)
    return df.to_string(index=False)


def format_plan(plan):
    return json_util.dumps(plan, indent=2)


def print_heading(text):
    print(f"\n--- {text} ---")


def print_table(title, rows, columns=None):
    print(f"\n{title}:")
    print(format_table(rows, columns))


def print_plan(title, plan):
    print(f"\n{title}:")
    print(format_plan(plan))
