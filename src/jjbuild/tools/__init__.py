"""Facades over the external code generators."""

from jjbuild.tools.base import Runner, ToolFacade, subprocess_runner
from jjbuild.tools.javacc import JavaCC
from jjbuild.tools.jjtree import JJTree
from jjbuild.tools.jtb import JTB

__all__ = ["JJTree", "JTB", "JavaCC", "Runner", "ToolFacade", "subprocess_runner"]
