"""
The VIEW layer draws chart visuals. Only ``surface`` is free of GUI imports;
the PyVista, pyqtgraph and widget modules need a Qt installation.
"""
