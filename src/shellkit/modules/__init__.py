"""Feature modules built on the shellkit core."""
