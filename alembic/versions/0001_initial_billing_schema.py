"""initial billing schema: teachers, books, bills, bill_items, payments

Revision ID: 0001a1b2c3d4
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


revision = "0001a1b2c3d4"
down_revision = None
branch_labels = None
depends_on = None

bill_status = sa.Enum("pending", "partially_paid", "paid", "closed", name="bill_status")


def _timestamps():
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "teachers",
        *_timestamps(),
        sa.Column("teacher_name", sa.String(255), nullable=False),
        sa.Column("mobile", sa.String(10), nullable=False),
        sa.Column("school_name", sa.String(255), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_teachers_id"), "teachers", ["id"], unique=False)
    op.create_index(op.f("ix_teachers_mobile"), "teachers", ["mobile"], unique=False)
    op.create_index(op.f("ix_teachers_deleted_at"), "teachers", ["deleted_at"], unique=False)

    op.create_table(
        "books",
        *_timestamps(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("default_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_books_id"), "books", ["id"], unique=False)
    op.create_index(op.f("ix_books_name"), "books", ["name"], unique=True)
    op.create_index(op.f("ix_books_is_active"), "books", ["is_active"], unique=False)

    op.create_table(
        "bills",
        *_timestamps(),
        sa.Column("bill_number", sa.String(50), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("teacher_id", sa.Uuid(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("remain_payment", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", bill_status, nullable=False),
        sa.Column("is_closed", sa.Boolean(), nullable=False),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"], unique=False)
    op.create_index(op.f("ix_bills_bill_number"), "bills", ["bill_number"], unique=True)
    op.create_index(op.f("ix_bills_teacher_id"), "bills", ["teacher_id"], unique=False)
    op.create_index(op.f("ix_bills_status"), "bills", ["status"], unique=False)

    op.create_table(
        "bill_items",
        *_timestamps(),
        sa.Column("bill_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("book_id", sa.Uuid(), nullable=True),
        sa.Column("book_name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("free_issue", sa.Integer(), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["book_id"], ["books.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bill_items_id"), "bill_items", ["id"], unique=False)
    op.create_index(op.f("ix_bill_items_bill_id"), "bill_items", ["bill_id"], unique=False)

    op.create_table(
        "payments",
        *_timestamps(),
        sa.Column("bill_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("collect_by", sa.String(255), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_id"), "payments", ["id"], unique=False)
    op.create_index(op.f("ix_payments_bill_id"), "payments", ["bill_id"], unique=False)
    op.create_index(op.f("ix_payments_deleted_at"), "payments", ["deleted_at"], unique=False)


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("bill_items")
    op.drop_table("bills")
    op.drop_table("books")
    op.drop_table("teachers")
    bill_status.drop(op.get_bind(), checkfirst=True)
