"""File name and storage path helpers.

The extension is everything after the last dot and the base name everything
before it. A name without a dot keeps an empty extension, so its stored path
ends with a trailing dot (``"docs/readme."``); callers rely on that exact form.
"""


def get_file_name_without_extension(file_name: str) -> str:
    dot_index = file_name.rfind(".")
    return file_name if dot_index == -1 else file_name[:dot_index]


def get_file_extension(file_name: str) -> str:
    dot_index = file_name.rfind(".")
    return "" if dot_index == -1 else file_name[dot_index + 1 :]


def split_file_name(file_name: str) -> tuple[str, str]:
    """Split a file name into (base name, extension)."""
    return get_file_name_without_extension(file_name), get_file_extension(file_name)


def generate_relative_path(folder: str, file_name: str, file_extension: str) -> str:
    return f"{folder}/{file_name}.{file_extension}"


def get_full_file_name(file_name: str, file_extension: str) -> str:
    return f"{file_name}.{file_extension}"
