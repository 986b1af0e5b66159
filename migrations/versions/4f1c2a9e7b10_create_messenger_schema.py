"""create messenger schema

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-10-19 09:12:44.118305

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f1c2a9e7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Step 1: Lists come first, usr points at them
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_list (
            list_id SERIAL PRIMARY KEY,
            list_type VARCHAR(10) NOT NULL CHECK (list_type IN ('block', 'contact'))
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS usr (
            login VARCHAR(50) PRIMARY KEY,
            phonenum VARCHAR(16) UNIQUE,
            password VARCHAR(50) NOT NULL,
            status VARCHAR(140),
            block_list INTEGER REFERENCES user_list(list_id) ON DELETE SET NULL,
            contact_list INTEGER REFERENCES user_list(list_id) ON DELETE SET NULL
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS user_list_contains (
            list_id INTEGER NOT NULL REFERENCES user_list(list_id) ON DELETE CASCADE,
            list_member VARCHAR(50) NOT NULL REFERENCES usr(login) ON DELETE CASCADE,
            PRIMARY KEY (list_id, list_member)
        )
    """)

    # Step 2: Chats, membership and messages
    op.execute("""
        CREATE TABLE IF NOT EXISTS chat (
            chat_id SERIAL PRIMARY KEY,
            chat_type VARCHAR(10) NOT NULL CHECK (chat_type IN ('group', 'private')),
            init_sender VARCHAR(50) NOT NULL REFERENCES usr(login)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS chat_list (
            chat_id INTEGER NOT NULL REFERENCES chat(chat_id) ON DELETE CASCADE,
            member VARCHAR(50) NOT NULL REFERENCES usr(login) ON DELETE CASCADE,
            PRIMARY KEY (chat_id, member)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS message (
            msg_id SERIAL PRIMARY KEY,
            msg_text VARCHAR(300),
            msg_timestamp TIMESTAMP NOT NULL DEFAULT NOW(),
            sender_login VARCHAR(50) REFERENCES usr(login),
            chat_id INTEGER NOT NULL REFERENCES chat(chat_id) ON DELETE CASCADE
        )
    """)

    # Step 3: Indexes for the lookups the client issues
    op.execute("CREATE INDEX IF NOT EXISTS idx_chat_list_member ON chat_list(member)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_message_chat ON message(chat_id, msg_timestamp DESC)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_message_sender ON message(sender_login, chat_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_user_list_member ON user_list_contains(list_member)")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TABLE IF EXISTS message")
    op.execute("DROP TABLE IF EXISTS chat_list")
    op.execute("DROP TABLE IF EXISTS chat")
    op.execute("DROP TABLE IF EXISTS user_list_contains")
    op.execute("DROP TABLE IF EXISTS usr")
    op.execute("DROP TABLE IF EXISTS user_list")
