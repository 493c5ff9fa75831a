from fund_crawler.main import main

main()
