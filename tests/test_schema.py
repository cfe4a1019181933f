"""Tests for schema rendering."""

from psqlm.schema.types import Column, ForeignKey, Index, Schema, Table


def test_render_full_table():
    schema = Schema()
    schema.add_table(
        Table(
            "public.orders",
            columns=[
                Column("id", "integer", False, "nextval('orders_id_seq'::regclass)"),
                Column("user_id", "integer", True),
            ],
            primary_key=["id"],
            foreign_keys=[ForeignKey(["user_id"], "public.users", ["id"])],
            indexes=[
                Index("orders_pkey", ["id"], unique=True),
                Index("orders_user_idx", ["user_id"]),
            ],
        )
    )

    assert schema.to_prompt_string() == (
        "Table: public.orders\n"
        "  Columns:\n"
        "    - id integer NOT NULL DEFAULT nextval('orders_id_seq'::regclass)\n"
        "    - user_id integer NULL\n"
        "  Primary Key: (id)\n"
        "  Foreign Keys:\n"
        "    - (user_id) -> public.users.id)\n"
        "  Indexes:\n"
        "    - UNIQUE orders_pkey (id)\n"
        "    - orders_user_idx (user_id)\n"
        "\n"
    )


def test_render_omits_empty_sections():
    schema = Schema()
    schema.add_table(Table("public.log", columns=[Column("msg", "text")]))

    assert schema.to_prompt_string() == (
        "Table: public.log\n  Columns:\n    - msg text NULL\n\n"
    )


def test_render_preserves_insertion_order():
    schema = Schema()
    schema.add_table(Table("public.zeta", columns=[Column("a", "int")]))
    schema.add_table(Table("public.alpha", columns=[Column("b", "int")]))

    rendered = schema.to_prompt_string()
    assert rendered.index("public.zeta") < rendered.index("public.alpha")
    assert len(schema) == 2


def test_composite_primary_key():
    table = Table(
        "public.pairs",
        columns=[Column("a", "int", False), Column("b", "int", False)],
        primary_key=["a", "b"],
    )
    assert "  Primary Key: (a, b)\n" in table.render()
    assert table.column_names == ["a", "b"]


def test_empty_schema_renders_nothing():
    assert Schema().to_prompt_string() == ""
