STAGE_INFO = {
    "upload": "#### Stage I: Upload Your Data\n\n **Upload a CSV dataset or an image file.**\n\nCSV files are previewed so you can check the columns; the header row is used to name the features. Images are kept as-is and passed along to the assistant.",
    "goal": "#### Stage II: Describe Your Goal\n\n What would you like to achieve with this data?\n\nWords such as *classify*, *categorize* or *identify* make it a classification task; *predict*, *forecast* or *estimate* make it a regression task. For CSV data the assistant also picks the target column from your goal.",
    "model_selection": {
        "title": "3 · Choose a Model",
        "description": (
            "The assistant proposes a recommended model and a few strong "
            "candidates for your goal. Pick one, or explore other well-known models."
        ),
        "how_it_works": (
            "A JSON-structured request returns the recommended model, the "
            "main options and a longer list of alternatives."
        ),
    },
    "results": {
        "title": "4 · Results Dashboard",
        "description": (
            "Simulated performance metrics, a step-by-step workflow explanation "
            "with code, and a test bench to try the model on your own values."
        ),
        "how_it_works": (
            "Nothing is trained: metrics, code and predictions are generated by "
            "the assistant for educational purposes only."
        ),
    },
}

EXAMPLE_GOALS = {
    "csv": [
        "Predict median house value based on other features",
        "Classify customers into churn categories",
        "Forecast monthly sales for the next quarter",
    ],
    "image": [
        "Classify images of cats and dogs",
        "Identify objects within the uploaded images",
        "Detect defects in product images",
    ],
}
