"""
Static question pools used when the model cannot generate questions.

Pools are keyed by subject, or by interview type when the subject is
general. Draws are shuffled with an injectable random generator so
tests can pin the output.
"""

import logging
import random

logger = logging.getLogger(__name__)


QUESTION_POOLS: dict[str, list[str]] = {
    "technical": [
        "Can you explain the difference between synchronous and asynchronous programming?",
        "What are the advantages of using a hash table?",
        "Explain the difference between REST and GraphQL APIs.",
        "What is the purpose of indexing in databases?",
        "How does garbage collection work in modern programming languages?",
        "What are the differences between SQL and NoSQL databases?",
        "How would you optimize a slow database query?",
        "Explain the concept of dependency injection.",
        "What is the difference between authentication and authorization?",
        "Explain the SOLID principles in software design.",
        "How would you implement caching in a web application?",
        "Explain the difference between horizontal and vertical scaling.",
    ],
    "dsa": [
        "Explain the difference between an array and a linked list. When would you use each?",
        "How would you detect a cycle in a linked list?",
        "What is a hash table and how does it handle collisions?",
        "Explain the concept of dynamic programming with an example.",
        "Explain the difference between breadth-first search and depth-first search.",
        "How would you find the kth largest element in an unsorted array?",
        "What is the difference between a min-heap and a max-heap?",
        "How would you implement an LRU cache?",
        "Explain how quicksort works and its average and worst-case time complexities.",
        "How would you find the shortest path in a weighted graph?",
    ],
    "java": [
        "Explain the difference between == and equals() in Java.",
        "What is the difference between an abstract class and an interface?",
        "How does garbage collection work in the JVM?",
        "Explain checked versus unchecked exceptions.",
        "How does HashMap work internally?",
        "What is the difference between ArrayList and LinkedList?",
        "Explain the volatile and synchronized keywords.",
        "What are Java streams and when would you use them?",
    ],
    "python": [
        "What is the difference between a list and a tuple in Python?",
        "Explain how Python's global interpreter lock affects concurrency.",
        "What are decorators and how would you write one?",
        "Explain the difference between deep copy and shallow copy.",
        "How do generators differ from regular functions?",
        "What are context managers and how do you implement one?",
        "Explain how Python manages memory.",
        "When would you use asyncio instead of threads?",
    ],
    "javascript": [
        "Explain the event loop in JavaScript.",
        "What is the difference between var, let and const?",
        "Explain closures with an example.",
        "How do promises differ from callbacks?",
        "What is prototypal inheritance?",
        "Explain the difference between == and === in JavaScript.",
        "What does async/await do under the hood?",
        "How does 'this' binding work in JavaScript?",
    ],
    "behavioral": [
        "Tell me about a time you faced a significant challenge at work and how you overcame it.",
        "Describe a situation where you had to work with a difficult team member.",
        "Give an example of a time you showed leadership.",
        "Tell me about a time you failed and what you learned from it.",
        "Describe a situation where you had to meet a tight deadline.",
        "Tell me about a time you disagreed with your manager.",
        "Describe a time you had to learn something new quickly.",
        "Give an example of how you prioritised competing tasks.",
        "Tell me about a project you are particularly proud of.",
        "Describe a time you received critical feedback and how you responded.",
    ],
    "case": [
        "How would you estimate the number of coffee shops in a large city?",
        "A client's profits have dropped 20% this year. How would you investigate?",
        "Should a retail company launch an online subscription service?",
        "How would you decide whether to enter a new geographic market?",
        "A product's user engagement is declining. What would you analyse first?",
        "How would you price a new software product for small businesses?",
        "Estimate the market size for electric scooters in your country.",
        "How would you reduce customer churn for a telecom company?",
    ],
    "system-design": [
        "Design a URL shortening service.",
        "How would you design a chat application that supports millions of users?",
        "Design a rate limiter for a public API.",
        "How would you design a news feed system?",
        "Design a distributed cache.",
        "How would you design a file storage service like a cloud drive?",
        "Design a notification system that supports email, SMS and push.",
        "How would you design a video streaming platform?",
    ],
    "general": [
        "Tell me about yourself.",
        "Why are you interested in this role?",
        "What are your greatest strengths?",
        "What is an area you are working to improve?",
        "Where do you see yourself in five years?",
        "Why do you want to leave your current position?",
        "What motivates you at work?",
        "How do you handle stress and pressure?",
        "What kind of work environment do you thrive in?",
        "Do you have any questions for us?",
    ],
    "ml": [
        "Explain the bias-variance trade-off.",
        "What is overfitting and how do you prevent it?",
        "How does gradient descent work?",
        "Explain the difference between supervised and unsupervised learning.",
        "How would you handle an imbalanced dataset?",
        "What evaluation metrics would you use for a classification problem?",
        "Explain how a random forest works.",
        "What is regularisation and why is it useful?",
    ],
    "data-science": [
        "How would you handle missing data in a dataset?",
        "Explain the difference between correlation and causation.",
        "How would you design an A/B test?",
        "What is a p-value and how do you interpret it?",
        "How do you detect and treat outliers?",
        "Walk me through how you would explore a new dataset.",
        "Explain the central limit theorem.",
        "How do you communicate technical findings to non-technical stakeholders?",
    ],
    "devops": [
        "What is continuous integration and continuous delivery?",
        "Explain the difference between containers and virtual machines.",
        "How would you design a zero-downtime deployment?",
        "What is infrastructure as code?",
        "How do you monitor a production service?",
        "Explain blue-green and canary deployments.",
        "How would you handle secrets in a CI/CD pipeline?",
        "What happens when a Kubernetes pod fails its liveness probe?",
    ],
    "cloud": [
        "Explain the shared responsibility model in cloud computing.",
        "What is the difference between IaaS, PaaS and SaaS?",
        "How would you design a highly available application in the cloud?",
        "How do you control cloud costs?",
        "Explain the difference between object, block and file storage.",
        "What is auto-scaling and how would you configure it?",
        "How would you secure a cloud network?",
        "Explain how a content delivery network works.",
    ],
    "mixed": [
        "Tell me about yourself and your technical background.",
        "Explain a complex technical concept in simple terms.",
        "Describe a challenging bug you fixed and how you found it.",
        "How do you stay current with technology?",
        "Tell me about a time you had to make a trade-off between quality and speed.",
        "How would you approach designing a new feature from scratch?",
        "Describe a time you mentored someone.",
        "What is the most interesting project you have worked on?",
    ],
}

DEFAULT_POOL_KEY = "general"


class QuestionBank:
    """Draws question texts from the static pools."""

    def __init__(
        self,
        pools: dict[str, list[str]] | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ):
        self.pools = pools or QUESTION_POOLS
        self.rng = rng or random.Random(seed)

    def pool_key(self, interview_type: str, subject: str | None) -> str:
        key = subject if subject and subject != "general" else interview_type
        return key if key in self.pools else DEFAULT_POOL_KEY

    def draw(
        self,
        interview_type: str,
        subject: str | None,
        count: int,
        previously_asked: list[str] | None = None,
    ) -> list[str]:
        """
        Draw exactly `count` question texts.

        Previously asked texts are excluded while enough alternatives
        remain. Otherwise unseen texts come first and the rest of the
        pool tops up the batch, repeating when the pool is smaller
        than `count`.
        """
        if count <= 0:
            return []

        key = self.pool_key(interview_type, subject)
        pool = self.pools[key]

        asked = {_normalize(text) for text in previously_asked or []}
        unseen = [text for text in pool if _normalize(text) not in asked]
        self.rng.shuffle(unseen)
        if len(unseen) >= count:
            return unseen[:count]

        logger.info(
            f"Question pool '{key}' has {len(unseen)} unseen questions "
            f"for {count} requested; allowing reuse"
        )
        seen = [text for text in pool if _normalize(text) in asked]
        self.rng.shuffle(seen)
        ordered = unseen + seen
        return [ordered[i % len(ordered)] for i in range(count)]


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())
