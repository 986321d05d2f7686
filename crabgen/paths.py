"""Project layout relative to the project root"""

from pathlib import Path

CONFIG_FILE_NAME = 'craby.toml'
TMP_DIR_NAME = '.craby'


def crate_dir(root: Path) -> Path:
    return root / 'crates' / 'lib'


def crate_src_dir(root: Path) -> Path:
    return crate_dir(root) / 'src'


def cxx_bridge_include_dir(root: Path) -> Path:
    return crate_dir(root) / 'include'


def cxx_dir(root: Path) -> Path:
    return root / 'cpp'


def android_path(root: Path) -> Path:
    return root / 'android'


def jni_base_path(root: Path) -> Path:
    return android_path(root) / 'src' / 'main' / 'jni'


def java_base_path(root: Path, package_name: str) -> Path:
    return android_path(root) / 'src' / 'main' / 'java' / Path(*package_name.split('.'))


def android_crate_dir(root: Path) -> Path:
    return root / 'crates' / 'android'


def ios_base_path(root: Path) -> Path:
    return root / 'ios'


def ios_crate_dir(root: Path) -> Path:
    return root / 'crates' / 'ios'


def craby_tmp_dir(root: Path) -> Path:
    return root / TMP_DIR_NAME


def config_path(root: Path) -> Path:
    return root / CONFIG_FILE_NAME


def android_src_main_path(root: Path) -> Path:
    return android_path(root) / 'src' / 'main'
