"""Console scripts shipped with the reader."""
