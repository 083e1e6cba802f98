from dataclasses import dataclass, field
from pathlib import Path

import torch
import yaml

BASE_DIR = Path(__file__).resolve().parent                                                    # Paths are relative to the project, not the terminal's directory
DATA_DIR = BASE_DIR / "aclImdb"
MODEL_PATH = BASE_DIR / "models" / "imdb_lstm_model.pth"
VOCAB_PATH = BASE_DIR / "models" / "imdb_lstm_vocab.json"


@dataclass(frozen = True)
class ModelConfig:
    max_tokens: int = 1000                                                                      # Vocabulary size, including padding and [UNK]
    sequence_length: int = 100                                                                  # Every review is padded/truncated to this many tokens
    embed_dim: int = 64
    hidden_dim: int = 64
    dense_dim: int = 64
    bidirectional: bool = True


@dataclass(frozen = True)
class TrainConfig:
    batch_size: int = 64
    epochs: int = 10
    lr: float = 0.001
    seed: int = 42
    threshold: float = 0.5                                                                      # Probability at or above which a review counts as positive


@dataclass(frozen = True)
class PathConfig:
    data_dir: Path = DATA_DIR
    model_path: Path = MODEL_PATH
    vocab_path: Path = VOCAB_PATH


@dataclass(frozen = True)
class Config:
    model: ModelConfig = field(default_factory = ModelConfig)
    training: TrainConfig = field(default_factory = TrainConfig)
    paths: PathConfig = field(default_factory = PathConfig)


def load_config(config_path = None):
    """Load a YAML config file, falling back to defaults for anything it leaves out."""
    if config_path is None:
        return _validate(Config())

    cfg_path = Path(config_path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding = "utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    base_dir = cfg_path.parent
    model_section = data.get("model") or {}
    training_section = data.get("training") or {}
    paths_section = data.get("paths") or {}

    defaults = ModelConfig()
    model = ModelConfig(
        max_tokens = int(model_section.get("max_tokens", defaults.max_tokens)),
        sequence_length = int(model_section.get("sequence_length", defaults.sequence_length)),
        embed_dim = int(model_section.get("embed_dim", defaults.embed_dim)),
        hidden_dim = int(model_section.get("hidden_dim", defaults.hidden_dim)),
        dense_dim = int(model_section.get("dense_dim", defaults.dense_dim)),
        bidirectional = model_section.get("bidirectional", defaults.bidirectional),
    )

    train_defaults = TrainConfig()
    training = TrainConfig(
        batch_size = int(training_section.get("batch_size", train_defaults.batch_size)),
        epochs = int(training_section.get("epochs", train_defaults.epochs)),
        lr = float(training_section.get("lr", train_defaults.lr)),
        seed = int(training_section.get("seed", train_defaults.seed)),
        threshold = float(training_section.get("threshold", train_defaults.threshold)),
    )

    paths = PathConfig(
        data_dir = _resolve_path(base_dir, paths_section.get("data_dir", DATA_DIR)),
        model_path = _resolve_path(base_dir, paths_section.get("model_path", MODEL_PATH)),
        vocab_path = _resolve_path(base_dir, paths_section.get("vocab_path", VOCAB_PATH)),
    )

    return _validate(Config(model = model, training = training, paths = paths))


def get_device():
    if torch.cuda.is_available():
        device = torch.device("cuda")                                                           # Use GPU if available
    elif torch.backends.mps.is_available():
        device = torch.device("mps")                                                            # Use MPS if CUDA not available
    else:
        device = torch.device("cpu")                                                            # Otherwise, CPU
    return device


def _validate(config):
    sizes = {
        "model.max_tokens": config.model.max_tokens,
        "model.sequence_length": config.model.sequence_length,
        "model.embed_dim": config.model.embed_dim,
        "model.hidden_dim": config.model.hidden_dim,
        "model.dense_dim": config.model.dense_dim,
        "training.batch_size": config.training.batch_size,
        "training.epochs": config.training.epochs,
    }
    for name, value in sizes.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")
    if not isinstance(config.model.bidirectional, bool):
        raise ValueError(f"model.bidirectional must be true or false, got {config.model.bidirectional!r}")
    if config.model.max_tokens < 3:
        raise ValueError("model.max_tokens must leave room for padding, [UNK] and at least one word")
    if config.training.lr <= 0:
        raise ValueError(f"training.lr must be positive, got {config.training.lr}")
    if not 0 < config.training.threshold < 1:
        raise ValueError(f"training.threshold must be in (0, 1), got {config.training.threshold}")
    return config


def _resolve_path(base, value):
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path
