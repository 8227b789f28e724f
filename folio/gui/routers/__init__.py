"""Route groups mounted by :mod:`folio.gui.app`."""
