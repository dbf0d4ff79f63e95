from runner_forge.cli import main

main()
