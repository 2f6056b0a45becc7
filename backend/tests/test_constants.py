import pytest
from broresolve.constants.tickets import (
    PRESENTATION_TABLES, PIPELINE, INITIAL_STAGE, TERMINAL_STAGE, Stage, Category, assert_exhaustive,
)
from broresolve.constants.roles import ROLE_CAPABILITIES, Role


@pytest.mark.parametrize('table,enum_cls,name', PRESENTATION_TABLES)
def test_presentation_tables_cover_every_variant(table, enum_cls, name):
    assert set(table) == set(enum_cls), name


def test_missing_variant_is_reported():
    partial = {Category.ACADEMIC: 'x'}
    with pytest.raises(RuntimeError) as exc:
        assert_exhaustive(partial, Category, 'PARTIAL')
    assert 'infrastructure' in str(exc.value)


def test_string_keys_are_rejected():
    table = {c.value: 'x' for c in Category}
    with pytest.raises(RuntimeError):
        assert_exhaustive(table, Category, 'STRING_KEYED')


def test_pipeline_order():
    assert [s.value for s in PIPELINE] == ['committed', 'reviewing', 'patching', 'resolved']
    assert INITIAL_STAGE is Stage.COMMITTED
    assert TERMINAL_STAGE is Stage.RESOLVED


def test_every_role_has_capabilities():
    assert set(ROLE_CAPABILITIES) == set(Role)
    assert ROLE_CAPABILITIES[Role.STUDENT] < ROLE_CAPABILITIES[Role.ADMIN]
