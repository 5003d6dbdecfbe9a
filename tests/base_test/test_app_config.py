#!filepath: tests/base_test/test_app_config.py
import yaml
import pytest
from pydantic import ValidationError

from forestlab.config import AppConfig
from forestlab.config.cluster_config import ClusterConfig
from forestlab.config.data_config import DataConfig
from forestlab.config.log_config import LogConfig
from forestlab.config.training_config import ModelRunConfig, TrainingConfig


@pytest.fixture
def sample_config_file(tmp_path, app_config_dict):
    """Temporary YAML config; pytest cleans tmp_path."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump(app_config_dict), encoding="utf-8")
    return config_file


def test_app_config_load(sample_config_file):
    cfg = AppConfig.load(path=str(sample_config_file))

    assert isinstance(cfg, AppConfig)
    assert isinstance(cfg.log, LogConfig)
    assert isinstance(cfg.cluster, ClusterConfig)
    assert isinstance(cfg.data, DataConfig)
    assert isinstance(cfg.training, TrainingConfig)


def test_log_config_values(sample_config_file):
    cfg = AppConfig.load(path=str(sample_config_file))
    assert cfg.log.level == "DEBUG"
    assert cfg.log.rotation == "1 day"


def test_model_runs_parsed(sample_config_file):
    cfg = AppConfig.load(path=str(sample_config_file))

    rf, gbm = cfg.training.models
    assert rf.family == "random_forest"
    assert rf.model_id == "rf_v1"
    assert gbm.hyperparameters()["learn_rate"] == 0.2


def test_default_base_config_loads(monkeypatch):
    """The bundled config describes the five cover-type models."""
    monkeypatch.delenv("FORESTLAB_H2O_URL", raising=False)
    monkeypatch.delenv("FORESTLAB_OUTPUT_DIR", raising=False)

    cfg = AppConfig.load()

    assert cfg.data.target == "Cover_Type"
    assert cfg.data.split_ratios == [0.6, 0.2]
    assert cfg.data.split_seed == 1234
    assert [m.model_id for m in cfg.training.models] == [
        "rf_covType_v1",
        "gbm_covType_v1",
        "gbm_covType_v2",
        "gbm_covType_v3",
        "rf_covType_v2",
    ]
    assert cfg.cluster.init_kwargs() == {"nthreads": -1, "max_mem_size": "8G"}


def test_env_overrides(sample_config_file, monkeypatch, tmp_path):
    monkeypatch.setenv("FORESTLAB_H2O_URL", "http://h2o.internal:54321")
    monkeypatch.setenv("FORESTLAB_OUTPUT_DIR", str(tmp_path / "elsewhere"))

    cfg = AppConfig.load(path=str(sample_config_file))

    assert cfg.cluster.init_kwargs() == {"url": "http://h2o.internal:54321"}
    assert cfg.training.artifacts.output_dir == str(tmp_path / "elsewhere")


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(path=str(tmp_path / "nope.yml"))


def test_missing_field_should_fail(tmp_path):
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text(yaml.safe_dump({"log": {"dir": "logs"}}))

    with pytest.raises(ValidationError):
        AppConfig.load(path=str(bad_file))


@pytest.mark.parametrize(
    "ratios",
    [[0.6], [0.6, 0.2, 0.1], [0.0, 0.5], [0.7, 0.3], [0.9, 0.2], [-0.1, 0.5]],
)
def test_bad_split_ratios_rejected(ratios):
    with pytest.raises(ValidationError):
        DataConfig(path="x.csv", target="y", split_ratios=ratios)


def test_unknown_hyperparameter_rejected():
    with pytest.raises(ValidationError):
        ModelRunConfig(family="random_forest", params={"learn_rate": 0.1})


def test_out_of_range_hyperparameter_rejected():
    with pytest.raises(ValidationError):
        ModelRunConfig(family="gbm", params={"sample_rate": 1.5})


def test_unknown_family_rejected():
    with pytest.raises(ValidationError):
        ModelRunConfig(family="xgboost")


def test_only_set_hyperparameters_forwarded():
    run = ModelRunConfig(family="gbm", params={"ntrees": 20, "stopping_metric": "logloss"})
    assert run.hyperparameters() == {"ntrees": 20, "stopping_metric": "logloss"}


def test_training_needs_at_least_one_model():
    with pytest.raises(ValidationError):
        TrainingConfig(name="empty", models=[])


def test_cluster_init_kwargs_attach_by_ip():
    cfg = ClusterConfig(ip="10.0.0.5", port=54321, nthreads=4)
    assert cfg.init_kwargs() == {"nthreads": 4, "ip": "10.0.0.5", "port": 54321}


def test_local_cluster_shut_down_by_default():
    assert ClusterConfig().should_shutdown()


@pytest.mark.parametrize(
    "attach", [{"url": "http://h2o:54321"}, {"ip": "10.0.0.5", "port": 54321}]
)
def test_attached_cluster_left_running_by_default(attach):
    cfg = ClusterConfig(**attach)
    assert cfg.attaching
    assert not cfg.should_shutdown()


def test_explicit_shutdown_setting_wins():
    assert ClusterConfig(url="http://h2o:54321", shutdown_on_exit=True).should_shutdown()
    assert not ClusterConfig(shutdown_on_exit=False).should_shutdown()
