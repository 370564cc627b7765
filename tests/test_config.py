import pytest

from ImageOrdering.config import (
    DEFAULT_CONFIG,
    SortConfig,
    create_config_from_preset,
    get_available_presets,
    get_default_config,
    load_config,
    print_available_presets,
    save_config,
    validate_config,
)


def test_default_config_is_valid():
    issues = validate_config(get_default_config())
    assert issues == {'errors': [], 'warnings': []}


def test_default_config_is_a_copy():
    config = get_default_config()
    config['bins'].append(1)
    assert DEFAULT_CONFIG['bins'] == [32, 32, 32]


@pytest.mark.parametrize("preset", ['fast', 'balanced', 'accurate', 'debug'])
def test_presets_are_valid(preset):
    assert validate_config(create_config_from_preset(preset))['errors'] == []


def test_preset_overrides():
    config = create_config_from_preset('fast', workers=2, comparison=None)
    assert config['bins'] == [8, 8, 8]
    assert config['workers'] == 2
    assert config['comparison'] == 'bhattacharyya'
    assert config['check_invariants'] is False


def test_unknown_preset():
    with pytest.raises(ValueError):
        create_config_from_preset('ultra')


@pytest.mark.parametrize("key, value", [
    ('bins', [8, 8]),
    ('bins', 0),
    ('comparison', 'cosine'),
    ('output_mode', 'move'),
    ('workers', 0),
    ('max_images', -3),
    ('extensions', []),
    ('log_level', 'LOUD'),
])
def test_validation_errors(key, value):
    config = get_default_config()
    config[key] = value
    assert validate_config(config)['errors']


def test_validation_warnings():
    config = get_default_config()
    config['bins'] = 128
    config['check_invariants'] = False
    config['colour_space'] = 'lab'
    issues = validate_config(config)
    assert issues['errors'] == []
    assert len(issues['warnings']) == 3


def test_save_and_load(tmp_path):
    path = tmp_path / "config.json"
    save_config({'bins': [4, 4, 4], 'workers': 3}, str(path))

    assert load_config(str(path), apply_defaults=False) == {'bins': [4, 4, 4], 'workers': 3}
    loaded = load_config(str(path))
    assert loaded['bins'] == [4, 4, 4]
    assert loaded['output_mode'] == 'hardlink'

    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_sort_config_from_dict():
    config = SortConfig.from_dict({'bins': 16, 'extensions': ['.png'], 'workers': 2})
    assert config.bins == (16, 16, 16)
    assert config.extensions == ('.png',)
    assert config.workers == 2
    assert config.output_mode == 'hardlink'
    assert config.to_dict()['bins'] == [16, 16, 16]


def test_sort_config_rejects_errors():
    with pytest.raises(ValueError):
        SortConfig.from_dict({'output_mode': 'teleport'})


def test_print_available_presets(capsys):
    print_available_presets()
    output = capsys.readouterr().out
    for preset in get_available_presets():
        assert preset in output
