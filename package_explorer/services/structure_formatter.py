"""
Servicio de Formateo Markdown del Árbol del Paquete
===================================================

Convierte el árbol de TreeNode del paquete de aplicación en un listado
textual de rutas, pensado para lectura humana y para modelos de IA.

Cada archivo aparece en su propia línea como ruta absoluta dentro del
contenido del paquete; los directorios sólo aportan su recorrido y, si
están vacíos, se listan con la barra final.

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

from typing import List

from package_explorer.models.tree_node import TreeNode


def format_markdown(root: TreeNode) -> str:
    """
    Convierte el árbol en un listado Markdown de rutas.

    Argumentos:
        root (TreeNode): Raíz sintética del árbol.

    Retorna:
        str: Una ruta por línea.

    Ejemplo de salida:
        /services.xml
        /schemas/music.sd
        /models/
    """
    lines: List[str] = []
    _append_lines(root, lines)
    return "\n".join(lines)


def _append_lines(node: TreeNode, lines: List[str]) -> None:
    prefix = "/"

    for child in node.children.values():
        if child.is_leaf:
            lines.append(f"{prefix}{child.path.lstrip('/')}")
        elif child.children:
            _append_lines(child, lines)
        else:
            lines.append(f"{prefix}{child.path.lstrip('/')}")
