"""Tests for slug normalization and section handling."""

import pytest

from admindash.errors import ValidationError
from admindash.services.scoping import slugify, normalize_section, describe_scope


NAMES = [
    'Infra',
    '  Infra & Ops ',
    'Deploy_Scripts--Prod',
    'Hello, World!',
    'already-a-slug',
    '--leading and trailing--',
    'Multiple    spaces\tand\ttabs',
    'Café Société',
    'C++ / C#',
    '___',
    'MiXeD CaSe 42',
]


class TestSlugify:
    def test_lowercases(self):
        assert slugify('Infra') == 'infra'

    def test_strips_punctuation(self):
        assert slugify('Hello, World!') == 'hello-world'

    def test_collapses_separators(self):
        assert slugify('Deploy_Scripts--Prod') == 'deploy-scripts-prod'
        assert slugify('a   b\t\tc') == 'a-b-c'

    def test_trims_hyphens(self):
        assert slugify('--leading and trailing--') == 'leading-and-trailing'

    def test_keeps_unicode_letters(self):
        assert slugify('Café Société') == 'café-société'

    def test_only_separators_gives_empty(self):
        assert slugify('___') == ''
        assert slugify('!!!') == ''

    @pytest.mark.parametrize('name', NAMES)
    def test_idempotent(self, name):
        once = slugify(name)
        assert slugify(once) == once


class TestNormalizeSection:
    def test_none_and_blank_are_global(self):
        assert normalize_section(None) is None
        assert normalize_section('') is None
        assert normalize_section('  ') is None

    def test_case_insensitive(self):
        assert normalize_section('scripts') == 'SCRIPTS'

    def test_unknown_section(self):
        with pytest.raises(ValidationError):
            normalize_section('KITCHEN')

    def test_describe_scope(self):
        assert describe_scope(None) == 'the global scope'
        assert describe_scope('NOTES') == 'section NOTES'
