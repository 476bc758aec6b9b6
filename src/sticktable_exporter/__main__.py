from sticktable_exporter.cli import main

main()
