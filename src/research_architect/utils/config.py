from pathlib import Path
import yaml
import os


DEFAULT_API_KEY_ENV = "API_KEY"


def load_config(config_path: str = None) -> dict:
    """Load configuration from file - config is required"""
    if not config_path:
        raise ValueError("Configuration file path is required")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as file:
            config = yaml.safe_load(file)
    except Exception as e:
        raise RuntimeError(f"Failed to load configuration from {config_path}: {e}")

    if not config:
        raise ValueError(f"Configuration file is empty: {config_path}")
    return config


def resolve_llm_config(config: dict) -> dict:
    """Return the llm section with the API key filled in from the environment when left blank"""
    llm_config = dict(config.get('llm') or {})
    if not llm_config.get('api_key'):
        env_name = llm_config.get('api_key_env') or DEFAULT_API_KEY_ENV
        llm_config['api_key'] = os.environ.get(env_name, "")
    return llm_config


def default_config_path() -> str:
    """configs/arch_config.yaml relative to the working directory"""
    return str(Path('configs') / 'arch_config.yaml')
