"""Unit tests for the command line scanner."""

import pytest

from src.sqlbackup.arguments import (
    ArgumentError,
    ArgumentParserError,
    ArgumentValidationError,
    OperationMode,
    parse_arguments,
)
from src.sqlbackup.arguments.modes import CONNECTION_ALIASES
from src.sqlbackup.models import RecoveryModel


class TestModeToken:
    """Test selection of the mode by the first token."""

    @pytest.mark.parametrize("token,mode", [
        ('/?', OperationMode.HELP),
        ('/help', OperationMode.HELP),
        ('/List', OperationMode.LIST),
        ('/BACKUP', OperationMode.BACKUP),
        ('/restore', OperationMode.RESTORE),
        ('/MODE', OperationMode.CHANGE_RECOVERY_MODE),
        ('/INFO', OperationMode.BACKUP_INFO),
        ('/dbinfo', OperationMode.DB_INFO),
        ('/PURGE', OperationMode.PURGE_BACKUP_HISTORY),
        ('/offline', OperationMode.TAKE_OFFLINE),
        ('/ONLINE', OperationMode.TAKE_ONLINE),
    ])
    def test_mode_tokens_are_case_insensitive(self, token, mode):
        parsed = parse_arguments([token], validate=False)
        assert parsed.mode == mode

    def test_empty_command_line_selects_help(self):
        assert parse_arguments([]).mode == OperationMode.HELP
        assert parse_arguments(None).mode == OperationMode.HELP

    def test_surrounding_whitespace_is_ignored(self):
        parsed = parse_arguments(['  /list ', '/C', 'LOCAL'])
        assert parsed.mode == OperationMode.LIST

    @pytest.mark.parametrize("token", ['/DB', 'backup', '/FOO', '/C'])
    def test_non_mode_first_token_fails(self, token):
        with pytest.raises(ArgumentParserError, match="is not a valid mode"):
            parse_arguments([token, '/C', 'LOCAL'])


class TestDatabaseLists:
    """Test bare words as database names."""

    def test_db_list_collects_names_in_order(self):
        parsed = parse_arguments(['/DBINFO', '/C', 'LOCAL', '/DB', 'prod', 'legacy'])
        assert parsed.use_all_databases is False
        assert parsed.databases == ('prod', 'legacy')

    def test_all_with_exclusions(self):
        parsed = parse_arguments(['/OFFLINE', '/ALL', 'dev', 'test', '/C', 'LOCAL'])
        assert parsed.use_all_databases is True
        assert parsed.databases == ('dev', 'test')

    def test_flag_closes_database_list(self):
        with pytest.raises(ArgumentParserError, match="Unknown argument: 'stray'"):
            parse_arguments(['/ONLINE', '/DB', 'a', '/C', 'LOCAL', 'stray'])

    def test_bare_word_before_list_is_unknown(self):
        with pytest.raises(ArgumentParserError, match="Unknown argument: 'prod'"):
            parse_arguments(['/PURGE', 'prod', '/C', 'LOCAL'])

    def test_unknown_flag_inside_list_is_unknown(self):
        with pytest.raises(ArgumentParserError, match="Unknown argument: '/FOO'"):
            parse_arguments(['/PURGE', '/DB', 'a', '/FOO'])

    def test_duplicate_names_differing_in_case_fail(self):
        with pytest.raises(ArgumentParserError, match="already in the list"):
            parse_arguments(['/ONLINE', '/C', 'LOCAL', '/DB', 'Sales', 'SALES'])

    def test_all_after_db_fails(self):
        with pytest.raises(ArgumentParserError, match="Cannot specify /ALL"):
            parse_arguments(['/ONLINE', '/DB', 'a', '/ALL'])

    def test_db_after_all_fails(self):
        with pytest.raises(ArgumentParserError, match="Cannot specify /DB"):
            parse_arguments(['/ONLINE', '/ALL', '/DB', 'a'])

    @pytest.mark.parametrize("flag", ['/ALL', '/DB'])
    def test_repeated_selection_flag_fails(self, flag):
        with pytest.raises(ArgumentParserError, match=f"Duplicate {flag}"):
            parse_arguments(['/ONLINE', flag, 'a', flag, 'b'])


class TestValueFlags:
    """Test flags that consume the following token."""

    @pytest.mark.parametrize("flag", ['/C', '/DIR', '/FILE', '/ID'])
    def test_missing_value_fails(self, flag):
        with pytest.raises(ArgumentParserError, match=f"'{flag}' requires a value"):
            parse_arguments(['/RESTORE', '/DB', 'a', flag])

    def test_value_is_used_verbatim(self):
        parsed = parse_arguments(['/BACKUP', '/C', 'Server=db1;UID=sa', '/FILE', '/DB', '/DB', 'x'])
        assert parsed.connection_string == 'Server=db1;UID=sa'
        assert parsed.backup_location == '/DB'
        assert parsed.is_directory is False
        assert parsed.databases == ('x',)

    def test_connection_alias_is_resolved(self):
        parsed = parse_arguments(['/LIST', '/C', 'local'])
        assert parsed.connection_string == CONNECTION_ALIASES['LOCAL']

    def test_directory_location(self):
        parsed = parse_arguments(['/BACKUP', '/C', 'LOCAL', '/DIR', 'D:\\Backups', '/ALL'])
        assert parsed.backup_location == 'D:\\Backups'
        assert parsed.is_directory is True

    def test_negative_backup_id(self):
        parsed = parse_arguments(['/RESTORE', '/C', 'LOCAL', '/DIR', 'x', '/DB', 'a', '/ID', '-2'])
        assert parsed.file_index == -2

    @pytest.mark.parametrize("value", ['abc', '1.5', ''])
    def test_non_integer_backup_id_fails(self, value):
        with pytest.raises(ArgumentParserError, match="as integer"):
            parse_arguments(['/RESTORE', '/ID', value])

    def test_zero_backup_id_fails(self):
        with pytest.raises(ArgumentParserError, match="cannot be zero"):
            parse_arguments(['/RESTORE', '/ID', '0'])


class TestModeLegality:
    """Test flags that are not allowed in the selected mode."""

    @pytest.mark.parametrize("argv", [
        ['/LIST', '/DB', 'a'],
        ['/RESTORE', '/LOG'],
        ['/RESTORE', '/VERIFY'],
        ['/BACKUP', '/ID', '-1'],
        ['/BACKUP', '/DISMOUNT'],
        ['/ONLINE', '/FILE', 'x.bak'],
        ['/INFO', '/FULL'],
        ['/?', '/ALL'],
    ])
    def test_flag_not_legal_in_mode(self, argv):
        with pytest.raises(ArgumentParserError, match="cannot be used in"):
            parse_arguments(argv)

    def test_recovery_model_flags(self):
        parsed = parse_arguments(['/MODE', '/C', 'LOCAL', '/DB', 'a', '/bulk'])
        assert parsed.recovery_model == RecoveryModel.BULK_LOGGED

    def test_second_recovery_model_fails(self):
        with pytest.raises(ArgumentParserError, match="Recovery model already set"):
            parse_arguments(['/MODE', '/FULL', '/SIMPLE'])


class TestValidationThroughParser:
    """Test that parsing validates unless asked not to."""

    def test_missing_connection_fails_validation(self):
        with pytest.raises(ArgumentValidationError, match="/C is required"):
            parse_arguments(['/LIST'])

    def test_validation_can_be_deferred(self):
        parsed = parse_arguments(['/LIST'], validate=False)
        assert parsed.is_validated is False

    def test_backup_info_with_only_location(self):
        parsed = parse_arguments(['/INFO', '/C', 'LOCAL', '/FILE', 'all.bak'])
        assert parsed.is_validated
        assert parsed.has_database_selection is False

    def test_errors_share_a_base_class(self):
        for argv in (['/NOPE'], ['/LIST']):
            with pytest.raises(ArgumentError):
                parse_arguments(argv)

    def test_full_backup_command_line(self):
        parsed = parse_arguments([
            '/BACKUP', '/C', 'EXPRESS', '/DIR', 'D:\\SqlBackup', '/ALL', 'dev', '/VERIFY', '/LOG'
        ])
        assert parsed.mode == OperationMode.BACKUP
        assert parsed.verify is True
        assert parsed.do_log_backup is True
        assert parsed.databases == ('dev',)
