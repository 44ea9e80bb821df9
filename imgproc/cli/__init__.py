"""imgproc command line entry points."""
