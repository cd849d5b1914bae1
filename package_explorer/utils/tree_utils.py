"""
Utilidades para recorrer árboles de TreeNode y aplanar rutas de archivos.
"""

from typing import List, Tuple

from package_explorer.models.tree_node import TreeNode

__all__ = ["flatten_file_paths", "count_nodes"]


def flatten_file_paths(node: TreeNode) -> List[str]:
    """
    Recorre recursivamente el árbol y devuelve las rutas de los archivos,
    en el orden en que se agregaron.

    Args:
        node: Raíz o subárbol.
    Returns:
        List[str]: Rutas relativas de las hojas.
    """
    if node.is_leaf:
        return [node.path]

    files: List[str] = []
    for child in node.children.values():
        files.extend(flatten_file_paths(child))
    return files


def count_nodes(node: TreeNode) -> Tuple[int, int]:
    """(archivos, directorios) bajo node, sin contar el propio node."""
    files = directories = 0
    for child in (node.children or {}).values():
        if child.is_leaf:
            files += 1
        else:
            directories += 1
            child_files, child_directories = count_nodes(child)
            files += child_files
            directories += child_directories
    return files, directories
