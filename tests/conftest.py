import pytest

from adfwriter.config import CONFIGURATION, ApplicationConfiguration


# NOTE: keep the developer's own config file and log file out of the tests.
@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    monkeypatch.setenv('ADFWRITER_CONFIG_FILE', str(tmp_path / 'missing-config.yaml'))
    monkeypatch.setenv('ADFWRITER_LOG_FILE', str(tmp_path / 'adfwriter.log'))
    for variable in ('ADFWRITER_LOG_LEVEL', 'ADFWRITER_JSON_INDENT', 'ADFWRITER_DEFAULT_PAYLOAD'):
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.delenv('ADFWRITER_REPORT_WARNINGS', raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def mock_configuration(isolated_environment):
    config = ApplicationConfiguration(
        log_file=None,
        log_level='WARNING',
        json_indent=2,
        report_warnings=False,
        default_payload='doc',
    )

    token = CONFIGURATION.set(config)

    yield config

    CONFIGURATION.reset(token)


@pytest.fixture
def work_item_markdown_description():
    """Markdown description of a work item exercising every supported construct."""
    return '\n'.join(
        [
            '# Release checklist',
            '',
            'This release ships the **new importer** and fixes ~~three~~ two bugs.',
            'See the [runbook](https://example.com/runbook) for `deploy` steps.',
            '',
            '## Steps',
            '',
            '1. Freeze the branch',
            '2. Run the migrations',
            '   - back up the database',
            '   - run `migrate --all`',
            '3. Announce the release',
            '',
            '## Owners',
            '',
            '| Area | Owner |',
            '|:-----|------:|',
            '| Importer | *Alice* |',
            '| Exporter | Bob |',
            '',
            '> Remember to update the changelog.',
            '> - before tagging',
            '',
            '```python',
            'def main():',
            '',
            '    return 0',
            '```',
        ]
    )
