# queries/pipelines.py
# Aggregation pipelines run server-side by queries.queries.


def average_price_by_genre_pipeline():
    """
    Group by genre with average price and count, sorted by average price
    descending.

    Returns:
        list[dict]: $group and $sort stages
    """
    return [
        {
            "$group": {
                "_id": "$genre",
                "averagePrice": {"$avg": "$price"},
                "count": {"$sum": 1},
            }
        },
        {"$sort": {"averagePrice": -1}},
    ]


def top_author_pipeline(limit=1):
    """
    Count books per author and keep the most prolific ones.

    Args:
        limit (int): Number of authors to keep. Defaults to 1

    Returns:
        list[dict]: $group, $sort and $limit stages
    """
    return [
        {"$group": {"_id": "$author", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": limit},
    ]


def books_by_decade_pipeline():
    """
    Count books per publication decade, oldest decade first.

    The decade key is floor(published_year / 10) * 10, the same arithmetic
    as bookstore.utils.decade_of.
    """
    decade = {
        "$multiply": [{"$floor": {"$divide": ["$published_year", 10]}}, 10]
    }
    return [
        {"$group": {"_id": decade, "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]
