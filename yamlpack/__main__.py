from yamlpack.cli.app import main

main()
