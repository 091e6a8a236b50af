from __future__ import annotations

from typing import List, Optional

assistant_instructions = """
## Role
You are an expert data scientist helping users with limited machine-learning experience.
Your answers are used to simulate a data-science workflow for educational purposes.

## Instructions
- Follow the requested response format exactly.
- When a JSON object is requested, respond ONLY with the JSON object.
"""

model_suggestions_instructions = """You are an expert data scientist. For a data science task of '{goal}' using {file_kind} data, provide a list of suitable machine learning models.

Your response must be a valid JSON object with the following structure:
{{
  "recommended": "The single best model for this task",
  "options": ["A list of 3-4 other strong candidates for this specific task"],
  "more_models": ["A comprehensive list of other well-known models relevant to this general task type (e.g., if it's classification, list other classifiers; if regression, other regressors). Ensure this list does not duplicate models from 'recommended' or 'options'."]
}}

For example, for a classification task like sentiment analysis, 'recommended' could be 'BERT', 'options' could be ['RoBERTa', 'Logistic Regression', 'XGBoost'], and 'more_models' could include ['Gaussian Naive Bayes', 'Support Vector Machine', 'K-Nearest Neighbors', 'Decision Tree', 'Random Forest'].

Respond ONLY with the JSON object."""

target_column_instructions = """
Given the data science goal: "{goal}" and the available CSV columns: [{columns}].
Identify the single column that is the target variable for prediction or classification.
Respond ONLY with the name of that column as a plain string. For example: "median_house_value".
Do not add any explanation or formatting. If no clear target can be identified, return the last column name from the list.
"""

workflow_explanation_instructions = """
You are an expert data scientist explaining your workflow. A user wants to achieve this goal: "{goal}".
They have provided {file_info} and selected the "{model}" model.

Generate a detailed, step-by-step explanation of the entire process in Markdown format. Cover the following sections:
1.  **Data Loading & Initial Analysis:** How the data is loaded and what initial checks are performed.
2.  **Data Preprocessing & Feature Engineering:** Specific steps taken to clean the data and create features suitable for the model. Be specific to the file type.
3.  **Model Implementation:** A high-level explanation of how the "{model}" model is trained on the preprocessed data. Include a conceptual Python code snippet using a common library like scikit-learn, pandas, or PyTorch/TensorFlow.

Ensure the explanation is clear, educational, and tailored to the user's goal and data.
"""

workflow_code_instructions = """
You are an expert data scientist tasked with generating a complete, runnable Python code script to achieve a user's goal.

**User's Goal:** "{goal}"
**Selected Model:** "{model}"
**Dataset Type:** CSV

**Dataset Details:**
*   **Columns:** {columns}
*   **Sample Data (first 5 rows):**
    ```csv
    {sample_rows}
    ```

**Your Task:**
Generate a detailed, step-by-step explanation of the entire process in Markdown format. This explanation MUST be accompanied by a single, complete Python code block that demonstrates the entire workflow. The user should be able to copy and paste this code and run it (assuming they have the full dataset in a file named 'dataset.csv' and the necessary libraries installed).

**The markdown explanation should cover:**
1.  **Setup and Data Loading:** Briefly explain loading the data.
2.  **Data Cleaning & Preprocessing:** Detail the steps taken, such as handling missing values, encoding categorical features (if any), and scaling numerical features. Justify your choices based on the sample data.
3.  **Feature Engineering:** If applicable, describe any new features created.
4.  **Model Training:** Explain the process of splitting the data and training the "{model}".
5.  **Evaluation:** Briefly mention how the model's performance would be evaluated.

**The Python code block should include:**
*   Importing necessary libraries (pandas, scikit-learn).
*   Loading the dataset (e.g., `pd.read_csv('dataset.csv')`).
*   A complete data cleaning and preprocessing pipeline. Use `scikit-learn`'s `Pipeline` and `ColumnTransformer` for a clean implementation where appropriate. Make intelligent choices based on the column names and sample data (e.g., use `OneHotEncoder` for text columns, `StandardScaler` for numeric columns).
*   Intelligently identifying the target variable based on the user's goal of "{goal}".
*   Splitting the data into training and testing sets.
*   Defining and training the specified "{model}".
*   Making predictions on the test set.
*   Printing out some example evaluation metrics relevant to the task (classification or regression).

Structure your response with the Markdown explanation first, followed by the complete Python code inside a fenced code block (```python ... ```).
"""

classification_metrics_text = (
    "For classification, include accuracy, precision, recall, F1-score, and a 2x2 "
    "confusion matrix for a binary case. The values should be between 0.85 and 0.98."
)
regression_metrics_text = (
    "For regression, include R-squared, Mean Squared Error (MSE), and Mean Absolute Error (MAE). "
    "R-squared should be between 0.8 and 0.95, and errors should be realistic for a sample problem."
)

metrics_instructions = """
For a '{model}' model trained for the task of '{goal}', generate a set of realistic but fictional performance metrics.
{task_description}
Respond ONLY with a valid JSON object.
"""

sample_row_instructions = """
You are a data generation assistant. Based on the following CSV headers and a few sample rows of data, generate one single, new, and realistic data point that plausibly belongs to the same dataset.
The user's goal is to predict the '{target}' column. Therefore, you MUST NOT generate a value for '{target}'. Generate values ONLY for the input features.

Input Feature CSV Headers: {features}
Target Column (DO NOT GENERATE): {target}

Here are some sample rows for context on the data's format and range (including the target for context, but do not generate it in your output):
{sample_rows}

Now, generate a new sample data point containing only the input features.
Respond ONLY with a valid JSON object where keys are the input feature headers and values are the data for the new sample. Ensure every input feature header is included as a key.
"""

prediction_instructions = (
    "A '{model}' model was trained to '{goal}'. {context} Given the sample input as a JSON "
    "object string: '{sample_input}', what is a realistic-looking prediction? Keep the response "
    "very concise and provide only the predicted value or class label. For example: "
    '"Predicted Price: $250,000" or "Classification: Spam".'
)


# ---- Prompt builders -------------------------------------------------------
def head_lines(content: str, start: int, stop: int) -> str:
    """Return lines ``start:stop`` of *content*, newline-joined."""
    return "\n".join(content.split("\n")[start:stop])


def model_suggestions_prompt(goal: str, file_kind: str) -> str:
    return model_suggestions_instructions.format(goal=goal, file_kind=file_kind)


def target_column_prompt(goal: str, column_names: List[str]) -> str:
    return target_column_instructions.format(goal=goal, columns=", ".join(column_names))


def workflow_prompt(
    goal: str,
    model: str,
    file_kind: str,
    column_names: Optional[List[str]] = None,
    raw_content: Optional[str] = None,
) -> str:
    """Pick the enriched code prompt for CSV data, the generic one otherwise."""
    if file_kind == "image" or not column_names or not raw_content:
        if file_kind == "csv":
            file_info = f"a CSV file with headers: {', '.join(column_names or [])}"
        else:
            file_info = "an image file"
        return workflow_explanation_instructions.format(goal=goal, file_info=file_info, model=model)

    return workflow_code_instructions.format(
        goal=goal,
        model=model,
        columns=", ".join(column_names),
        sample_rows=head_lines(raw_content, 0, 5),  # header + 4 rows
    )


def metrics_prompt(model: str, goal: str, classification: bool) -> str:
    task_description = classification_metrics_text if classification else regression_metrics_text
    return metrics_instructions.format(model=model, goal=goal, task_description=task_description)


def sample_row_prompt(features: List[str], raw_content: str, target: str) -> str:
    return sample_row_instructions.format(
        target=target,
        features=", ".join(features),
        sample_rows=head_lines(raw_content, 1, 4),
    )


def prediction_prompt(
    goal: str, model: str, sample_input: str, column_names: Optional[List[str]] = None
) -> str:
    context = f"The data has these columns: {', '.join(column_names)}." if column_names else ""
    return prediction_instructions.format(
        model=model, goal=goal, context=context, sample_input=sample_input
    )
