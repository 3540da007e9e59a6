from yomichan_dict_builder.builder import main

main()
