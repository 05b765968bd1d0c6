# Streamlit script target: streamlit run data_cleaner/app.py
from data_cleaner.main import main

main()
