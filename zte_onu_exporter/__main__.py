"""Run the exporter with python -m zte_onu_exporter."""

from .server import main

main()
