"""DropVault: drag-and-drop file vault with a simulated upload tracker."""

__version__ = "0.1.0"
