"""add_views_functions_rls

Revision ID: 7d3f90b6e215
Revises: 4b1e7c2a9d10
Create Date: 2026-03-02 11:40:07.093316

"""

from collections.abc import Sequence

from alembic import op

from infrastructure.database.models import (
    COMMENTS_WITH_USERS_VIEW_SQL,
    RECIPE_STATS_VIEW_SQL,
)

# revision identifiers, used by Alembic.
revision: str = "7d3f90b6e215"
down_revision: str | Sequence[str] | None = "4b1e7c2a9d10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add read views, aggregate functions, RLS policies and the signup trigger.

    The API connects with a role that bypasses RLS and enforces ownership in
    the service layer. The policies apply to direct Supabase client access.
    """
    # --- Views ---
    op.execute(RECIPE_STATS_VIEW_SQL)
    op.execute(COMMENTS_WITH_USERS_VIEW_SQL)

    # --- Aggregate functions ---
    op.execute("""
        CREATE OR REPLACE FUNCTION get_recipe_like_count(recipe_uuid UUID)
        RETURNS INTEGER
        LANGUAGE sql
        STABLE
        AS $$
            SELECT COUNT(*)::INTEGER FROM likes WHERE recipe_id = recipe_uuid;
        $$;
    """)
    op.execute("""
        CREATE OR REPLACE FUNCTION get_recipe_comment_count(recipe_uuid UUID)
        RETURNS INTEGER
        LANGUAGE sql
        STABLE
        AS $$
            SELECT COUNT(*)::INTEGER FROM comments WHERE recipe_id = recipe_uuid;
        $$;
    """)
    op.execute("""
        CREATE OR REPLACE FUNCTION has_user_liked_recipe(recipe_uuid UUID, user_uuid UUID)
        RETURNS BOOLEAN
        LANGUAGE sql
        STABLE
        AS $$
            SELECT EXISTS (
                SELECT 1 FROM likes WHERE recipe_id = recipe_uuid AND user_id = user_uuid
            );
        $$;
    """)

    # --- Profile row for every new auth user ---
    # ON CONFLICT keeps it idempotent with the API's fallback insert.
    op.execute("""
        CREATE OR REPLACE FUNCTION handle_new_user()
        RETURNS TRIGGER
        LANGUAGE plpgsql
        SECURITY DEFINER
        SET search_path = public
        AS $$
        BEGIN
            INSERT INTO profiles (id, email, username, full_name)
            VALUES (
                NEW.id,
                NEW.email,
                NULLIF(NEW.raw_user_meta_data->>'username', ''),
                NULLIF(NEW.raw_user_meta_data->>'full_name', '')
            )
            ON CONFLICT (id) DO NOTHING;
            RETURN NEW;
        END;
        $$;
    """)
    op.execute("""
        CREATE TRIGGER on_auth_user_created
            AFTER INSERT ON auth.users
            FOR EACH ROW EXECUTE FUNCTION handle_new_user();
    """)

    # --- RLS ---
    for table in ["profiles", "recipes", "comments", "likes"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # Everything is publicly readable
    for table in ["profiles", "recipes", "comments", "likes"]:
        op.execute(f"""
            CREATE POLICY {table}_select ON {table}
                FOR SELECT USING (true);
        """)

    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK ((SELECT auth.uid()) = id);
    """)
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING ((SELECT auth.uid()) = id);
    """)

    # Recipes, comments and likes: only the owning user writes
    for table in ["recipes", "comments", "likes"]:
        op.execute(f"""
            CREATE POLICY {table}_insert ON {table}
                FOR INSERT WITH CHECK ((SELECT auth.uid()) = user_id);
        """)
        op.execute(f"""
            CREATE POLICY {table}_delete ON {table}
                FOR DELETE USING ((SELECT auth.uid()) = user_id);
        """)
    for table in ["recipes", "comments"]:
        op.execute(f"""
            CREATE POLICY {table}_update ON {table}
                FOR UPDATE USING ((SELECT auth.uid()) = user_id);
        """)


def downgrade() -> None:
    """Remove policies, trigger, functions and views."""
    for table in ["recipes", "comments"]:
        op.execute(f"DROP POLICY IF EXISTS {table}_update ON {table};")
    for table in ["recipes", "comments", "likes"]:
        op.execute(f"DROP POLICY IF EXISTS {table}_delete ON {table};")
        op.execute(f"DROP POLICY IF EXISTS {table}_insert ON {table};")
    op.execute("DROP POLICY IF EXISTS profiles_update ON profiles;")
    op.execute("DROP POLICY IF EXISTS profiles_insert ON profiles;")
    for table in ["profiles", "recipes", "comments", "likes"]:
        op.execute(f"DROP POLICY IF EXISTS {table}_select ON {table};")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP TRIGGER IF EXISTS on_auth_user_created ON auth.users;")
    op.execute("DROP FUNCTION IF EXISTS handle_new_user();")
    op.execute("DROP FUNCTION IF EXISTS has_user_liked_recipe(UUID, UUID);")
    op.execute("DROP FUNCTION IF EXISTS get_recipe_comment_count(UUID);")
    op.execute("DROP FUNCTION IF EXISTS get_recipe_like_count(UUID);")
    op.execute("DROP VIEW IF EXISTS comments_with_users;")
    op.execute("DROP VIEW IF EXISTS recipe_stats;")
