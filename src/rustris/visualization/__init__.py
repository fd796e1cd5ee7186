"""pygame front end: keyboard mapping, frame clock and snapshot drawing."""
