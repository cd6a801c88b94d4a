from missing_files.cli import main

main()
