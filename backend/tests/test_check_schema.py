from scripts.check_schema import TABLE_SQL, find_missing_tables


def test_all_tables_present(fake_supabase):
    assert find_missing_tables(fake_supabase) == []
    assert {t for t, _ in fake_supabase.calls} == set(TABLE_SQL)


def test_missing_tables_are_reported(fake_supabase, capsys):
    fake_supabase.fail_tables.update({"messages", "projects"})
    assert find_missing_tables(fake_supabase) == ["messages", "projects"]
    assert "✗ messages" in capsys.readouterr().out


def test_canvas_table_only_accepts_known_shape_types():
    assert "'rectangle', 'circle', 'text', 'line'" in TABLE_SQL["canvas_objects"]
