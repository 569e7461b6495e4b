"""Tests for FieldInfo and ModelInfo construction."""

import sqlite3
import sys
import unittest
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "packages" / "core_engine" / "src"))

from gen_core.builder import (
    UNSUPPORTED_PARSER,
    build_fields,
    build_model_info,
    create_gorm_annotation,
    create_protobuf_annotation,
    load_table_infos,
)
from gen_core.config import GeneratorConfig
from gen_core.errors import CompositePrimaryKeyError, UnsupportedPrimaryKeyError
from gen_core.issues import by_code, has_errors
from gen_core.mappings import TypeRegistry
from gen_core.meta import ColumnMeta, DbTableMeta
from gen_core.samples import TypeCategory

FIXTURES = ROOT / "tests" / "fixtures"

REGISTRY = TypeRegistry.with_defaults()


def _table(name, *columns):
    metas = []
    for i, (col_name, type_name, extra) in enumerate(columns):
        metas.append(ColumnMeta(index=i, name=col_name, database_type_name=type_name, **extra))
    return DbTableMeta("mysql", "shop", name, metas)


def _pk(**extra):
    return dict(nullable=False, is_primary_key=True, **extra)


class TestBuildFields(unittest.TestCase):

    def setUp(self):
        self.config = GeneratorConfig()
        self.issues = []

    def test_unknown_type_is_skipped(self):
        meta = _table(
            "places",
            ("id", "int", _pk()),
            ("geo", "geography", {}),
            ("name", "varchar", {}),
        )
        fields = build_fields(meta, self.config, REGISTRY, self.issues)

        self.assertEqual([f.field_name for f in fields], ["ID", "Name"])
        self.assertEqual([f.index for f in fields], [0, 1])
        self.assertEqual([f.column_meta.index for f in fields], [0, 2])

        unknown = by_code(self.issues, "UNKNOWN_TYPE")
        self.assertEqual(len(unknown), 1)
        self.assertEqual(unknown[0].path, "/places/geo")
        self.assertIn("geography", unknown[0].message)
        self.assertFalse(has_errors(self.issues))

    def test_unknown_type_without_issue_list(self):
        meta = _table("places", ("geo", "geography", {}))
        self.assertEqual(build_fields(meta, self.config, REGISTRY), [])

    def test_nullable_and_null_safe_types(self):
        meta = _table(
            "items",
            ("count", "int", dict(nullable=False)),
            ("price", "decimal", dict(nullable=True)),
        )
        fields = build_fields(meta, self.config, REGISTRY)
        self.assertEqual([f.field_type for f in fields], ["int32", "sql.NullFloat64"])

        fields = build_fields(meta, GeneratorConfig(use_guregu_types=True), REGISTRY)
        self.assertEqual([f.field_type for f in fields], ["int32", "null.Float"])

    def test_sample_values_follow_native_type(self):
        meta = _table(
            "samples",
            ("flag", "boolean", {}),
            ("n", "bigint", {}),
            ("ratio", "double", {}),
            ("label", "text", {}),
            ("raw", "blob", {}),
            ("at", "datetime", {}),
        )
        values = [f.sample_value for f in build_fields(meta, self.config, REGISTRY)]
        self.assertIs(values[0], True)
        self.assertEqual(values[1], 1)
        self.assertEqual(values[2], 1.0)
        self.assertEqual(values[3], "hello world")
        self.assertEqual(values[4], b"hello world")
        self.assertIsInstance(values[5], datetime)

    def test_name_collision_is_renamed(self):
        meta = _table(
            "accounts",
            ("user_id", "varchar", {}),
            ("User_Id", "varchar", {}),
            ("userId", "varchar", {}),
        )
        fields = build_fields(meta, self.config, REGISTRY, self.issues)

        self.assertEqual([f.field_name for f in fields], ["UserID", "UserID_", "UserID__"])
        self.assertEqual(fields[0].notes, "")
        self.assertIn("renamed to UserID_", fields[1].notes)
        self.assertEqual(len(by_code(self.issues, "NAME_COLLISION")), 2)
        self.assertEqual([f.json_field_name for f in fields], ["user_id", "user_id", "user_id"])

    def test_primary_key_parser(self):
        meta = _table("users", ("id", "bigint", _pk()), ("email", "varchar", {}))
        fields = build_fields(meta, self.config, REGISTRY)
        self.assertEqual(fields[0].primary_key_field_parser, "parseInt64")
        self.assertEqual(fields[0].primary_key_arg_name, "argId")
        self.assertEqual(fields[1].primary_key_field_parser, "")

    def test_primary_key_parser_from_custom_mapping(self):
        registry = TypeRegistry.with_defaults()
        registry.load_file(FIXTURES / "custom_mappings.yaml")
        meta = _table("sessions", ("token", "uuid", _pk()))
        fields = build_fields(meta, self.config, registry)
        self.assertEqual(fields[0].field_type, "uuid.UUID")
        self.assertEqual(fields[0].primary_key_field_parser, "parseUUID")

    def test_unsupported_primary_key(self):
        meta = _table("rates", ("rate", "decimal", _pk()), ("label", "text", {}))
        with self.assertRaises(UnsupportedPrimaryKeyError) as ctx:
            build_fields(meta, self.config, REGISTRY)
        self.assertEqual(ctx.exception.table, "rates")
        self.assertEqual(ctx.exception.column, "rate")
        self.assertEqual(ctx.exception.field_type, "float64")
        self.assertNotEqual(UNSUPPORTED_PARSER, "")

    def test_composite_primary_key(self):
        meta = _table("links", ("a", "int", _pk()), ("b", "int", _pk()))
        with self.assertRaises(CompositePrimaryKeyError) as ctx:
            build_fields(meta, self.config, REGISTRY)
        self.assertEqual(ctx.exception.columns, ["a", "b"])

    def test_composite_key_with_unmapped_member(self):
        meta = _table("regions", ("a_id", "int", _pk()), ("geo", "geography", _pk()), ("name", "text", {}))
        with self.assertRaises(CompositePrimaryKeyError) as ctx:
            build_fields(meta, self.config, REGISTRY, self.issues)
        self.assertEqual(ctx.exception.columns, ["a_id", "geo"])
        self.assertEqual(len(by_code(self.issues, "UNKNOWN_TYPE")), 1)

    def test_protobuf_positions_put_keys_first(self):
        meta = _table(
            "users",
            ("name", "varchar", {}),
            ("id", "int", _pk()),
            ("email", "varchar", {}),
        )
        config = GeneratorConfig(add_json_annotation=False, add_protobuf_annotation=True)
        fields = build_fields(meta, config, REGISTRY)

        self.assertEqual([f.protobuf_pos for f in fields], [2, 1, 3])
        self.assertEqual(fields[0].annotations, ['protobuf:"string,2,opt,name=name"'])

    def test_annotation_order(self):
        meta = _table("users", ("id", "int", _pk(is_auto_increment=True)))
        config = GeneratorConfig(
            add_gorm_annotation=True,
            add_db_annotation=True,
            add_protobuf_annotation=True,
            json_name_format="camel",
        )
        annotations = build_fields(meta, config, REGISTRY)[0].annotations
        self.assertEqual(
            annotations,
            [
                'gorm:"primary_key;AUTO_INCREMENT;column:id;type:INT;"',
                'json:"Id"',
                'db:"id"',
                'protobuf:"int32,1,opt,name=id"',
            ],
        )

    def test_json_name_format(self):
        meta = _table("events", ("created_at", "timestamp", {}))
        fields = build_fields(meta, GeneratorConfig(json_name_format="lower_camel"), REGISTRY)
        self.assertEqual(fields[0].annotations, ['json:"createdAt"'])
        self.assertEqual(fields[0].protobuf_type, "google.protobuf.Timestamp")


class TestAnnotations(unittest.TestCase):

    def test_gorm_size_and_default(self):
        column = ColumnMeta(
            index=0, name="email", database_type_name="varchar", column_length=255, default_value='"x"'
        )
        self.assertEqual(
            create_gorm_annotation(column), "gorm:\"column:email;type:VARCHAR;size:255;default:'x';\""
        )

    def test_gorm_skips_null_and_function_defaults(self):
        null_default = ColumnMeta(index=0, name="a", database_type_name="text", default_value="NULL")
        fn_default = ColumnMeta(index=0, name="b", database_type_name="timestamp", default_value="now()")
        self.assertEqual(create_gorm_annotation(null_default), 'gorm:"column:a;type:TEXT;"')
        self.assertEqual(create_gorm_annotation(fn_default), 'gorm:"column:b;type:TIMESTAMP;"')

    def test_gorm_keeps_literal_default_with_paren(self):
        column = ColumnMeta(index=0, name="c", database_type_name="varchar", default_value="'a(b'")
        self.assertEqual(create_gorm_annotation(column), "gorm:\"column:c;type:VARCHAR;default:'a(b';\"")

    def test_protobuf_annotation_needs_type(self):
        column = ColumnMeta(index=0, name="a", database_type_name="int")
        self.assertIsNone(create_protobuf_annotation("snake", column, "", 1))


class TestBuildModelInfo(unittest.TestCase):

    def test_names_and_instance(self):
        meta = _table("order_items", ("id", "int", _pk()), ("qty", "smallint", {}))
        model = build_model_info(meta, "order_items", GeneratorConfig(model_package_name="store"), REGISTRY)

        self.assertEqual(model.package_name, "store")
        self.assertEqual(model.struct_name, "OrderItem")
        self.assertEqual(model.short_struct_name, "o")
        self.assertEqual(model.instance, {"ID": 1, "Qty": 1})
        self.assertEqual([f.field_name for f in model.primary_key_fields()], ["ID"])

    def test_notes_collect_column_and_field_notes(self):
        meta = DbTableMeta(
            "postgres",
            "shop",
            "tags",
            [
                ColumnMeta(index=0, name="labels", database_type_name="text", is_array=True, notes="array column"),
                ColumnMeta(index=1, name="Labels", database_type_name="text"),
            ],
        )
        model = build_model_info(meta, "tags", GeneratorConfig(), REGISTRY)
        notes = model.notes().splitlines()
        self.assertEqual(len(notes), 2)
        self.assertIn("array column", notes[0])
        self.assertIn("renamed", notes[1])

    def test_fake_instance_is_reproducible(self):
        meta = _table(
            "users",
            ("id", "int", _pk()),
            ("email", "varchar", {}),
            ("active", "bool", {}),
            ("joined", "date", {}),
        )
        model = build_model_info(meta, "users", GeneratorConfig(), REGISTRY)
        first = model.fake_instance(seed=42)
        self.assertEqual(first, model.fake_instance(seed=42))
        self.assertEqual(sorted(first), ["Active", "Email", "ID", "Joined"])
        self.assertIsInstance(first["ID"], int)
        self.assertIsInstance(first["Joined"], datetime)


class TestOrdersTable(unittest.TestCase):
    """End to end from a live SQLite catalog to a model descriptor."""

    def setUp(self):
        self.conn = sqlite3.connect(":memory:")
        self.conn.executescript(
            """
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY NOT NULL,
                total DECIMAL(10,2),
                created_at TIMESTAMP NOT NULL
            );
            CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT NOT NULL);
            CREATE TABLE composite (a INTEGER, b INTEGER, PRIMARY KEY (a, b));
            CREATE TABLE empty_map (shape GEOGRAPHY);
            """
        )
        self.config = GeneratorConfig(sql_type="sqlite3", sql_database="main")

    def tearDown(self):
        self.conn.close()

    def test_orders_fields(self):
        infos = load_table_infos(self.conn, self.config, REGISTRY, ["orders"])
        model = infos["orders"]
        id_field, total, created_at = model.fields

        self.assertEqual(model.struct_name, "Order")
        self.assertEqual(id_field.field_type, "int32")
        self.assertEqual(id_field.primary_key_field_parser, "parseInt32")
        self.assertTrue(id_field.column_meta.is_auto_increment)

        self.assertEqual(total.field_type, "sql.NullFloat64")
        self.assertEqual(total.sample_value, 1.0)
        self.assertEqual(total.category, TypeCategory.FLOAT)

        self.assertEqual(created_at.field_type, "time.Time")
        self.assertIsInstance(created_at.sample_value, datetime)
        self.assertEqual(created_at.annotations, ['json:"created_at"'])

    def test_all_tables_with_failures_reported(self):
        issues = []
        infos = load_table_infos(self.conn, self.config, REGISTRY, issues=issues)

        self.assertEqual(list(infos), ["orders", "users"])
        self.assertEqual([infos[name].index for name in infos], [0, 1])
        self.assertEqual([infos[name].index_plus1 for name in infos], [1, 2])

        self.assertEqual(by_code(issues, "BUILD_FAILED")[0].path, "/composite")
        self.assertEqual(by_code(issues, "NO_FIELDS")[0].path, "/empty_map")
        self.assertEqual(len(by_code(issues, "UNKNOWN_TYPE")), 1)
        self.assertTrue(has_errors(issues))

    def test_missing_table_and_bracketed_names(self):
        issues = []
        infos = load_table_infos(self.conn, self.config, REGISTRY, ["missing", "[users]"], issues)

        self.assertEqual(list(infos), ["users"])
        self.assertEqual(infos["users"].index, 0)
        failed = by_code(issues, "LOAD_FAILED")
        self.assertEqual(len(failed), 1)
        self.assertEqual(failed[0].severity, "error")
        self.assertIn("missing", failed[0].message)


if __name__ == "__main__":
    unittest.main()
