"""Static meal plan used when generation is unavailable."""

import logging

from healer.domain.meals import (
    MealRecommendation,
    RecommendationResult,
    RecommendationSource,
)
from healer.domain.profile import HealthProfile

_logger = logging.getLogger(__name__)

# Each entry carries a low and a regular sodium value (mg); everything else is
# identical for every profile.
FALLBACK_CATALOG: tuple[dict[str, object], ...] = (
    {
        "name": "Heart-Healthy Mediterranean Quinoa Bowl with Avocado & Salmon",
        "dietaryPreference": "Non-vegetarian",
        "cookingTime": "25-30min",
        "totalCalories": 480,
        "ingredients": [
            "1 cup organic quinoa, rinsed thoroughly",
            "2 cups low-sodium vegetable broth",
            "4 oz wild-caught salmon fillet",
            "1/2 large ripe avocado, sliced",
            "1 cup fresh baby spinach leaves",
            "1/4 cup cherry tomatoes, halved",
            "2 tablespoons extra virgin olive oil",
            "1 tablespoon fresh lemon juice",
            "1 teaspoon dried oregano",
            "1/2 teaspoon garlic powder",
            "1/4 cup red onion, finely diced",
            "Salt and black pepper to taste",
        ],
        "ingredientCalories": {
            "quinoa": 220,
            "salmon": 180,
            "avocado": 120,
            "olive oil": 240,
            "vegetables": 60,
            "seasonings": 10,
        },
        "nutrients": {"protein": 28, "carbs": 42, "fats": 22, "fiber": 9, "sugar": 4},
        "sodium_low": 380,
        "sodium_high": 450,
        "steps": [
            "Rinse 1 cup quinoa under cold water using a fine mesh strainer for 2 "
            "minutes until water runs clear",
            "In a medium saucepan, bring 2 cups of low-sodium vegetable broth to a "
            "rolling boil over high heat",
            "Add rinsed quinoa to boiling broth, reduce heat to low, cover and "
            "simmer for 15 minutes until liquid is fully absorbed",
            "While quinoa cooks, preheat oven to 400°F and line a baking sheet "
            "with parchment paper",
            "Place 4 oz salmon fillet on baking sheet, drizzle with 1 tablespoon "
            "olive oil, and season with oregano, garlic powder, salt and pepper",
            "Bake salmon for 12-15 minutes until it flakes easily with a fork and "
            "reaches internal temperature of 145°F",
            "Remove quinoa from heat and let stand covered for 5 minutes, then "
            "fluff with fork to separate grains",
            "Prepare dressing by whisking together 1 tablespoon olive oil, lemon "
            "juice, and seasonings in a small bowl",
            "Assemble bowls with spinach base, warm quinoa, flaked salmon, avocado "
            "slices, tomatoes, and red onion",
            "Drizzle with prepared dressing and serve immediately",
        ],
        "keyBenefits": "Low sodium, high omega-3, rich in fiber and antioxidants",
        "whyThisHelps": (
            "Salmon provides anti-inflammatory omega-3 fatty acids that support "
            "cardiovascular health and help lower cholesterol. Quinoa offers "
            "complete protein and high fiber to stabilize blood sugar. Avocado "
            "provides monounsaturated fats and potassium to help regulate blood "
            "pressure. Leafy greens are rich in nitrates that naturally lower "
            "blood pressure."
        ),
        "matchScore": 92,
    },
    {
        "name": "Blood Sugar Friendly Chickpea & Vegetable Curry with Brown Rice",
        "dietaryPreference": "Vegan",
        "cookingTime": "30-40min",
        "totalCalories": 420,
        "ingredients": [
            "1 cup brown rice, uncooked",
            "1 can (15 oz) low-sodium chickpeas, drained and rinsed",
            "1 cup cauliflower florets",
            "1/2 cup green beans, trimmed and cut",
            "1/2 onion, finely chopped",
            "2 cloves garlic, minced",
            "1 tablespoon fresh ginger, grated",
            "1 can (14 oz) diced tomatoes, no salt added",
            "1 cup light coconut milk",
            "2 teaspoons curry powder",
            "1 teaspoon turmeric",
            "1/2 teaspoon cumin",
            "1 tablespoon coconut oil",
            "Fresh cilantro for garnish",
        ],
        "ingredientCalories": {
            "brown rice": 220,
            "chickpeas": 270,
            "vegetables": 80,
            "coconut milk": 120,
            "coconut oil": 120,
            "spices": 10,
        },
        "nutrients": {"protein": 18, "carbs": 65, "fats": 12, "fiber": 15, "sugar": 8},
        "sodium_low": 320,
        "sodium_high": 400,
        "steps": [
            "Rinse 1 cup brown rice under cold water and cook according to package "
            "instructions using water or low-sodium broth",
            "Heat 1 tablespoon coconut oil in a large skillet over medium heat for "
            "2 minutes until shimmering",
            "Add chopped onion and sauté for 5 minutes until translucent",
            "Add minced garlic and grated ginger, cooking for 1 minute until "
            "aromatic but not browned",
            "Stir in curry powder, turmeric, and cumin, toasting spices for 30 "
            "seconds to release flavors",
            "Add diced tomatoes with their juices and simmer gently for 5 minutes",
            "Add chickpeas, cauliflower florets, and green beans, stirring to coat "
            "with sauce",
            "Pour in light coconut milk and bring to a simmer, then reduce heat to "
            "low and cover",
            "Cook for 15-20 minutes until vegetables are tender but still have "
            "some bite",
            "Season with herbs and spices to taste, avoiding added salt",
            "Serve over cooked brown rice, garnished with fresh cilantro leaves",
        ],
        "keyBenefits": "High fiber, low glycemic index, plant-based protein",
        "whyThisHelps": (
            "Chickpeas provide slow-digesting carbohydrates and plant-based "
            "protein that help stabilize blood sugar levels. Brown rice has a "
            "lower glycemic index than white rice. Turmeric contains curcumin with "
            "anti-inflammatory properties. The high fiber content helps lower "
            "cholesterol and improves digestive health."
        ),
        "matchScore": 88,
    },
    {
        "name": "Immune-Boosting Ginger Turmeric Chicken Soup with Vegetables",
        "dietaryPreference": "Non-vegetarian",
        "cookingTime": "40-50min",
        "totalCalories": 380,
        "ingredients": [
            "6 cups low-sodium chicken broth",
            "2 chicken breasts, boneless and skinless",
            "1 tablespoon fresh ginger, grated",
            "2 teaspoons fresh turmeric, grated",
            "3 cloves garlic, minced",
            "1 onion, diced",
            "2 carrots, sliced",
            "2 celery stalks, chopped",
            "1 cup kale, stems removed and chopped",
            "1 zucchini, diced",
            "2 tablespoons olive oil",
            "1 bay leaf",
            "1 teaspoon thyme",
            "Black pepper to taste",
            "Fresh parsley for garnish",
        ],
        "ingredientCalories": {
            "chicken": 230,
            "broth": 40,
            "vegetables": 80,
            "olive oil": 240,
            "herbs and spices": 10,
        },
        "nutrients": {"protein": 35, "carbs": 22, "fats": 18, "fiber": 6, "sugar": 8},
        "sodium_low": 350,
        "sodium_high": 420,
        "steps": [
            "Heat 2 tablespoons olive oil in a large stockpot over medium heat",
            "Add diced onion and sauté for 5 minutes until softened",
            "Add minced garlic, grated ginger and turmeric, cooking for 1 minute "
            "until fragrant",
            "Pour in 6 cups of low-sodium chicken broth and bring to a gentle boil",
            "Add whole chicken breasts to the pot along with bay leaf and thyme",
            "Reduce heat to low, cover and simmer for 20 minutes until chicken is "
            "cooked through",
            "Remove chicken, let it cool slightly, then shred with two forks",
            "Add carrots and celery to the broth and simmer for 10 minutes",
            "Add diced zucchini and cook for another 5 minutes until all "
            "vegetables are tender",
            "Return shredded chicken to the pot and add kale, cooking for 2-3 "
            "minutes until it wilts",
            "Season with black pepper and remove the bay leaf",
            "Garnish with fresh parsley and serve hot",
        ],
        "keyBenefits": "Anti-inflammatory, hydrating, rich in vitamins and minerals",
        "whyThisHelps": (
            "Ginger and turmeric have anti-inflammatory and immune-supporting "
            "properties. Chicken provides lean protein for tissue repair. The "
            "broth base supports hydration while staying low in calories, and the "
            "low sodium content keeps it heart-healthy."
        ),
        "matchScore": 95,
    },
    {
        "name": "Low-Sodium Asian Stir-Fry with Tofu and Vegetables",
        "dietaryPreference": "Vegetarian",
        "cookingTime": "20-25min",
        "totalCalories": 350,
        "ingredients": [
            "8 oz firm tofu, pressed and cubed",
            "2 cups mixed vegetables (broccoli, bell peppers, carrots, snap peas)",
            "2 cloves garlic, minced",
            "1 tablespoon fresh ginger, grated",
            "2 tablespoons low-sodium soy sauce",
            "1 tablespoon rice vinegar",
            "1 teaspoon sesame oil",
            "1 tablespoon olive oil",
            "1 teaspoon cornstarch",
            "2 tablespoons water",
            "1/4 cup green onions, chopped",
            "1 tablespoon sesame seeds",
            "1 cup brown rice, cooked",
        ],
        "ingredientCalories": {
            "tofu": 180,
            "vegetables": 100,
            "rice": 220,
            "oils": 120,
            "sauces": 30,
            "seasonings": 10,
        },
        "nutrients": {"protein": 22, "carbs": 45, "fats": 12, "fiber": 8, "sugar": 6},
        "sodium_low": 320,
        "sodium_high": 380,
        "steps": [
            "Press tofu for 15 minutes to remove excess water, then cut into "
            "1-inch cubes",
            "Heat 1 tablespoon olive oil in a large wok over medium-high heat",
            "Cook tofu for 5-7 minutes until golden on all sides, then remove",
            "In the same pan, cook garlic and ginger for 30 seconds until fragrant",
            "Add mixed vegetables and stir-fry for 4-5 minutes until crisp-tender",
            "Whisk soy sauce, rice vinegar, cornstarch and water in a small bowl",
            "Return tofu to the pan and pour the sauce over everything",
            "Stir for 2-3 minutes until the sauce thickens",
            "Drizzle with sesame oil and toss to combine",
            "Serve over brown rice, garnished with green onions and sesame seeds",
        ],
        "keyBenefits": "Low sodium, plant-based protein, rich in antioxidants",
        "whyThisHelps": (
            "Tofu provides complete plant-based protein that is low in saturated "
            "fat. The vegetables offer a wide range of antioxidants. Low-sodium "
            "soy sauce keeps the dish heart-healthy, and the fiber helps keep "
            "blood sugar steady."
        ),
        "matchScore": 90,
    },
    {
        "name": "Omega-3 Rich Baked Mackerel with Roasted Sweet Potatoes and Greens",
        "dietaryPreference": "Non-vegetarian",
        "cookingTime": "30-35min",
        "totalCalories": 420,
        "ingredients": [
            "2 mackerel fillets (6 oz each)",
            "2 medium sweet potatoes, peeled and cubed",
            "4 cups mixed greens (spinach, arugula, kale)",
            "2 tablespoons olive oil",
            "1 lemon, sliced",
            "2 cloves garlic, minced",
            "1 teaspoon paprika",
            "1/2 teaspoon dried thyme",
            "1/4 teaspoon black pepper",
            "1 tablespoon balsamic vinegar",
            "1/4 cup red onion, thinly sliced",
        ],
        "ingredientCalories": {
            "mackerel": 280,
            "sweet potatoes": 180,
            "greens": 40,
            "olive oil": 240,
            "seasonings": 10,
        },
        "nutrients": {"protein": 30, "carbs": 35, "fats": 18, "fiber": 7, "sugar": 12},
        "sodium_low": 280,
        "sodium_high": 350,
        "steps": [
            "Preheat oven to 400°F and line two baking sheets with parchment paper",
            "Toss sweet potato cubes with 1 tablespoon olive oil, paprika, and "
            "black pepper",
            "Roast sweet potatoes in a single layer for 25-30 minutes until tender",
            "Place mackerel fillets skin side down on the second baking sheet",
            "Rub fish with garlic, thyme, and remaining olive oil, then top with "
            "lemon slices",
            "Bake fish for 12-15 minutes until it flakes easily with a fork",
            "Meanwhile toss mixed greens with red onion",
            "Drizzle the salad with balsamic vinegar and a pinch of black pepper",
            "Serve mackerel alongside the sweet potatoes and green salad",
            "Squeeze extra lemon juice over the fish before serving",
        ],
        "keyBenefits": "High omega-3, anti-inflammatory, blood sugar stabilizing",
        "whyThisHelps": (
            "Mackerel is rich in omega-3 fatty acids that reduce inflammation. "
            "Sweet potatoes provide complex carbohydrates with a lower glycemic "
            "index than white potatoes, and the combination of healthy fats, "
            "complex carbs, and fiber helps keep blood sugar stable."
        ),
        "matchScore": 93,
    },
)


def fallback_meal_plan(profile: HealthProfile) -> RecommendationResult:
    """Return the static meal plan, lowering sodium for high blood pressure."""
    sodium_key = "sodium_low" if profile.has_high_blood_pressure else "sodium_high"
    meals = [_build_meal(entry, sodium_key) for entry in FALLBACK_CATALOG]
    _logger.info(
        "Serving fallback meal plan (low_sodium=%s)", profile.has_high_blood_pressure
    )
    return RecommendationResult.success(meals, RecommendationSource.FALLBACK)


def _build_meal(entry: dict[str, object], sodium_key: str) -> MealRecommendation:
    data = {
        key: value
        for key, value in entry.items()
        if key not in {"sodium_low", "sodium_high"}
    }
    data["nutrients"] = {**entry["nutrients"], "sodium": entry[sodium_key]}
    return MealRecommendation.model_validate(data)
