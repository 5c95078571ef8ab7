from typing import List


# ---- Category Read Operations ----


def get_category_by_slug(tx, slug):
    """
    Finds an active master category by its slug.
    This function is designed to be called within a transaction
    """
    query = """
    MATCH (c:MasterCategory {slug: $slug})
    WHERE coalesce(c.is_active, true)
    RETURN c.id AS id, c.name AS name, c.slug AS slug, c.color AS color
    """
    result = tx.run(query, slug=slug)
    record = result.single()
    return dict(record) if record else None


def get_all_categories(tx):
    """
    Retrieves all active master categories in display order.
    """
    query = """
    MATCH (c:MasterCategory)
    WHERE coalesce(c.is_active, true)
    RETURN c.id AS id, c.name AS name, c.slug AS slug, c.color AS color
    ORDER BY c.sort_order
    """
    result = tx.run(query)
    return [dict(record) for record in result]


# ---- Trick Read Operations ----


def get_published_tricks(tx, category_id) -> List[dict]:
    """
    Retrieves the published tricks of one master category, easiest first.
    Tricks without a difficulty come before everything else.
    """
    query = """
    MATCH (t:Trick {is_published: true})-[:IN_SUBCATEGORY]->(:Subcategory)
          -[:IN_CATEGORY]->(c:MasterCategory {id: $category_id})
    RETURN t.id AS id,
           t.name AS name,
           coalesce(t.prerequisite_ids, []) AS prerequisite_refs,
           t.difficulty_level AS difficulty,
           c.id AS category_id
    ORDER BY t.difficulty_level IS NOT NULL, t.difficulty_level
    """
    result = tx.run(query, category_id=category_id)
    return [dict(record) for record in result]


def trick_exists(tx, trick_id: str) -> bool:
    """
    Checks if a trick with the given id exists in the database.
    """
    query = """
    MATCH (t:Trick {id: $trick_id})
    RETURN count(t) > 0 AS trick_exists
    """
    result = tx.run(query, trick_id=trick_id).single()
    return result["trick_exists"] if result else False


# ---- Completion Operations ----


def get_completed_trick_ids(tx, user_id: str) -> List[str]:
    """
    Retrieves the ids of every trick the user has marked as "can do".
    """
    query = """
    MATCH (u:User {id: $user_id})-[r:CAN_DO]->(t:Trick)
    WHERE r.can_do = true
    RETURN COLLECT(DISTINCT t.id) AS trick_ids
    """
    result = tx.run(query, user_id=user_id)
    record = result.single()
    return record["trick_ids"] if record and record["trick_ids"] is not None else []


def mark_trick_completed(tx, user_id: str, trick_id: str):
    """
    Upserts the (user, trick) completion record and stamps when it was achieved.
    """
    query = """
    MERGE (u:User {id: $user_id})
    WITH u
    MATCH (t:Trick {id: $trick_id})
    MERGE (u)-[r:CAN_DO]->(t)
    SET r.can_do = true, r.achieved_at = datetime()
    RETURN r.can_do AS can_do
    """
    result = tx.run(query, user_id=user_id, trick_id=trick_id)
    return result.single()


def unmark_trick_completed(tx, user_id: str, trick_id: str):
    """
    Deletes the (user, trick) completion record.
    """
    query = """
    MATCH (u:User {id: $user_id})-[r:CAN_DO]->(t:Trick {id: $trick_id})
    DELETE r
    """
    tx.run(query, user_id=user_id, trick_id=trick_id)


def count_trick_completions(tx, trick_id: str) -> int:
    """
    Counts how many users can do the given trick.
    """
    query = """
    MATCH (:User)-[r:CAN_DO]->(t:Trick {id: $trick_id})
    WHERE r.can_do = true
    RETURN count(r) AS can_do_count
    """
    result = tx.run(query, trick_id=trick_id).single()
    return result["can_do_count"] if result else 0
